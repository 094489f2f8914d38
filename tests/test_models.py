"""
Tests for the default domain object (de)serializers.
"""

import pytest

from scopelink.models import BitId, ComponentObjects, ConsumerComponent, ScopeDescriptor


class TestBitId:
    """Test component id parsing."""

    def test_box_and_name(self):
        bit_id = BitId.parse("utils/is-string")
        assert (bit_id.box, bit_id.name, bit_id.version, bit_id.scope) == (
            "utils",
            "is-string",
            None,
            None,
        )

    def test_with_version_and_scope(self):
        bit_id = BitId.parse("core/utils/is-string@1.0.0")
        assert bit_id == BitId(box="utils", name="is-string", version="1.0.0", scope="core")
        assert str(bit_id) == "core/utils/is-string@1.0.0"

    def test_canonical_form(self):
        assert str(BitId.parse("a/b@1.0.0")) == "a/b@1.0.0"

    @pytest.mark.parametrize("text", ["justname", "a/b/c/d", "a//b", "a/b@", ""])
    def test_invalid_ids(self, text):
        with pytest.raises(ValueError):
            BitId.parse(text)


class TestComponentObjects:
    """Test component object bundles."""

    def test_from_string(self):
        bundle = ComponentObjects.from_string('{"component": "abc", "objects": ["x", "y"]}')
        assert bundle == ComponentObjects(component="abc", objects=["x", "y"])

    def test_null_is_nil(self):
        assert ComponentObjects.from_string("null") is None

    @pytest.mark.parametrize("text", ["{oops", "[]", '{"objects": []}'])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            ComponentObjects.from_string(text)


class TestConsumerComponent:
    """Test consumer components."""

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValueError, match="Invalid component fields"):
            ConsumerComponent.from_string('{"name": "a", "box": "b", "colour": "red"}')

    def test_id(self):
        component = ConsumerComponent(name="is-string", box="utils", version="1.0.0")
        assert str(component.id) == "utils/is-string@1.0.0"


class TestScopeDescriptor:
    """Test scope descriptors."""

    def test_extra_fields_kept(self):
        descriptor = ScopeDescriptor.from_string('{"name": "main", "owner": "me"}')
        assert descriptor.name == "main"
        assert descriptor.metadata == {"owner": "me"}
        assert descriptor.to_dict() == {"name": "main", "owner": "me"}

    def test_name_required(self):
        with pytest.raises(ValueError):
            ScopeDescriptor.from_dict({"owner": "me"})
