# src/atlas_releaseconfig/core/config/errors.py
"""
Exceções da camada de settings do Atlas ReleaseConfig.

Estas exceções cobrem apenas o carregamento e a validação dos arquivos de
settings que dirigem uma resolução (quais raízes ler, qual release gerar,
onde escrever). Falhas da resolução em si pertencem a `core.errors`.

Invariantes:
    - Todas as exceções de settings herdam de `ConfigError`
    - Nenhuma exceção de settings representa erro de merge de releases
"""


class ConfigError(Exception):
    """Base para erros de carregamento, merge ou validação de settings."""


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de settings base (defaults) não existe.

    O arquivo de defaults é obrigatório; nenhum default implícito é criado.
    """


class UnsupportedConfigFormatError(ConfigError):
    """Extensão de arquivo de settings não suportada (apenas .yaml, .yml, .json)."""


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz de um arquivo de settings não é um mapa."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge de settings.

    Exemplo:
        - defaults: {"output": {"formats": ["json"]}}
        - local:    {"output": "out/"}
    """


class InvalidSettingsError(ConfigError):
    """Settings mesclados não satisfazem o schema de `ResolutionSettings`."""


__all__ = [
    "ConfigError",
    "DefaultsNotFoundError",
    "UnsupportedConfigFormatError",
    "InvalidConfigRootTypeError",
    "ConfigTypeConflictError",
    "InvalidSettingsError",
]
