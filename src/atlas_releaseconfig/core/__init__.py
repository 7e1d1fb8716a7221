# src/atlas_releaseconfig/core/__init__.py
"""
Core do Atlas ReleaseConfig.

O core é projetado para ser:
    - determinístico (mesma árvore de entrada, mesmos artefatos)
    - testável de forma isolada (sem estado global)
    - explícito nas falhas (um tipo de erro por violação)

Componentes principais:
    - types / errors → vocabulário e catálogo de falhas
    - records        → leitura e escrita de records
    - registry       → estado acumulado por resolução
    - loader         → ingestão de raízes de contribuição
    - engine         → merge e achatamento
    - release_configs → aggregate root
    - context        → eventos e warnings por resolução
    - config         → settings da resolução
    - traceability   → manifest de resolução
"""
