# tests/core/types/test_record_types.py
"""
Testes dos tipos canônicos de records.

Cobre:
- leitura de valores tagged e "nus" (`Value.from_raw`)
- forma serializada de um `Value`
- parse de `Workflow`
- validação de tipos de campo em `from_dict`
- aplicação de defaults da raiz em `FlagDeclaration.with_defaults`
"""

import pytest

from atlas_releaseconfig.core.errors import RecordLoadError
from atlas_releaseconfig.core.types import (
    FlagDeclaration,
    FlagValue,
    ReleaseConfigContributionRecord,
    ReleaseConfigMapRecord,
    Value,
    ValueKind,
    Workflow,
)


def test_value_from_raw_accepts_tagged_and_bare_forms():
    assert Value.from_raw(None).kind is ValueKind.UNSPECIFIED
    assert Value.from_raw("on") == Value.string("on")
    assert Value.from_raw(True) == Value.boolean(True)
    assert Value.from_raw({"string_value": "x"}) == Value.string("x")
    assert Value.from_raw({"bool_value": False}) == Value.boolean(False)
    assert Value.from_raw({"unspecified_value": True}).is_unspecified
    assert Value.from_raw({"obsolete": True}).kind is ValueKind.OBSOLETE


def test_value_from_raw_rejects_unknown_shapes():
    with pytest.raises(RecordLoadError):
        Value.from_raw(3)
    with pytest.raises(RecordLoadError):
        Value.from_raw({"string_value": "a", "bool_value": True})
    with pytest.raises(RecordLoadError) as exc:
        Value.from_raw({"int_value": 1}, source="x.yaml")
    assert exc.value.details["path"] == "x.yaml"


def test_value_serialized_form_and_render():
    assert Value.string("on").to_dict() == {"string_value": "on"}
    assert Value.boolean(True).to_dict() == {"bool_value": True}
    assert Value.unspecified().to_dict() == {"unspecified_value": True}
    assert Value.obsolete().to_dict() == {"obsolete": True}

    assert Value.string("on").render() == "on"
    assert Value.boolean(True).render() == "true"
    assert Value.boolean(False).render() == ""
    assert Value.unspecified().render() == ""


def test_workflow_parse():
    assert Workflow.parse(None) is Workflow.UNSPECIFIED
    assert Workflow.parse("MANUAL") is Workflow.MANUAL
    assert Workflow.parse("UNSPECIFIED_workflow") is Workflow.UNSPECIFIED
    with pytest.raises(RecordLoadError):
        Workflow.parse("SOMETIMES")


def test_flag_declaration_from_dict_and_defaults():
    decl = FlagDeclaration.from_dict({"name": "FOO", "value": "off", "workflow": "LAUNCH"})
    assert decl.containers is None
    assert decl.namespace is None

    normalized = decl.with_defaults(containers=("system", "vendor"), namespace="android_UNKNOWN")
    assert normalized.containers == ("system", "vendor")
    assert normalized.namespace == "android_UNKNOWN"
    assert normalized.value == Value.string("off")

    explicit = FlagDeclaration.from_dict({"name": "BAR", "containers": ["product"], "namespace": "ns"})
    kept = explicit.with_defaults(containers=("system",), namespace="android_UNKNOWN")
    assert kept.containers == ("product",)
    assert kept.namespace == "ns"


def test_from_dict_rejects_bad_field_types():
    with pytest.raises(RecordLoadError):
        FlagDeclaration.from_dict({"name": ""})
    with pytest.raises(RecordLoadError):
        FlagDeclaration.from_dict({"name": "FOO", "containers": "system"})
    with pytest.raises(RecordLoadError):
        FlagValue.from_dict({"name": "FOO", "redacted": "yes"})
    with pytest.raises(RecordLoadError):
        ReleaseConfigContributionRecord.from_dict({"name": "r", "inherits": "base"})
    with pytest.raises(RecordLoadError):
        ReleaseConfigMapRecord.from_dict({"aliases": [{"name": "a"}]})


def test_flag_value_from_dict_keeps_source_path():
    fv = FlagValue.from_dict({"name": "FOO", "value": True, "redacted": True}, source="d/FOO.yaml")
    assert fv.path == "d/FOO.yaml"
    assert fv.redacted is True
    assert fv.to_dict() == {"name": "FOO", "value": {"bool_value": True}, "redacted": True}


def test_contribution_record_defaults():
    rec = ReleaseConfigContributionRecord.from_dict({"name": "trunk"})
    assert rec.inherits == ()
    assert rec.aconfig_value_sets == ()
    assert rec.aconfig_flags_only is False
    assert rec.prior_stages == ()
