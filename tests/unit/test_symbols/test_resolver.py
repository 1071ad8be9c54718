"""
Unit tests for dotted-name and exclusion resolution.

Tests nested-name preference, ancestor lookup, the root namespace
diagnostic, and the instance versus class-level exclusion kinds.
"""

import json
import json.decoder

import pytest

from myprof.symbols import ClassLevelScope, ObjectScope, RootScope, SymbolResolver, resolve_name
from myprof.validation import ResolutionError


class Outer:
    class Inner:
        def ping(self):
            return "nested"


class GlobalInner:
    def ping(self):
        return "global"


class Base:
    class Shared:
        pass

    def helper(self):
        return "base"


class Derived(Base):
    label = "not a scope"

    @classmethod
    def build(cls):
        return cls()

    @staticmethod
    def util():
        return 1

    def run(self):
        return self.helper()


class Alpha:
    def m1(self):
        pass


class Beta:
    @classmethod
    def m2(cls):
        pass


@pytest.fixture
def root():
    return RootScope({
        "Outer": Outer,
        "Inner": GlobalInner,
        "Base": Base,
        "Derived": Derived,
        "A": Alpha,
        "B": Beta,
        "json": json,
        "value": 3,
    })


@pytest.fixture
def resolver(root):
    return SymbolResolver(root)


@pytest.mark.unit
class TestResolveName:
    """Test cases for resolve_name."""

    def test_nested_name_wins_over_top_level(self, root):
        """Outer.Inner picks the nested class even though a top-level Inner exists."""
        scope = resolve_name(root, "Outer.Inner")
        assert scope.obj is Outer.Inner

    def test_unqualified_name_is_top_level(self, root):
        """A single segment resolves in the root namespace."""
        assert resolve_name(root, "Inner").obj is GlobalInner

    def test_missing_top_level_name(self, root):
        """Unknown root names raise with the root namespace diagnostic."""
        with pytest.raises(ResolutionError) as exc_info:
            resolve_name(root, "Missing")
        assert "root namespace" in str(exc_info.value)
        assert exc_info.value.value == "Missing"

    def test_name_found_on_ancestor(self, root):
        """Names a class does not own are looked up on its bases first."""
        assert resolve_name(root, "Derived.Shared").obj is Base.Shared

    def test_falls_back_to_root_when_no_ancestor_owns_name(self, root):
        """A name nobody in the chain owns comes from the root namespace."""
        assert resolve_name(root, "Derived.Inner").obj is GlobalInner

    def test_missing_nested_name(self, root):
        """An unknown member that the root does not own either is an error."""
        with pytest.raises(ResolutionError):
            resolve_name(root, "Outer.Nope")

    @pytest.mark.parametrize("name", ["", "Outer..Inner", ".Outer", "Outer."])
    def test_malformed_names(self, root, name):
        """Empty segments are rejected."""
        with pytest.raises(ResolutionError):
            resolve_name(root, name)

    def test_non_container_value(self, root):
        """Names must denote modules or classes."""
        with pytest.raises(ResolutionError) as exc_info:
            resolve_name(root, "value")
        assert "not a class or module" in str(exc_info.value)

    def test_class_attribute_is_not_a_scope(self, root):
        """Plain class attributes are not containers."""
        with pytest.raises(ResolutionError):
            resolve_name(root, "Derived.label")

    def test_module_member(self, root):
        """Modules resolve their members and submodules."""
        assert resolve_name(root, "json.decoder.JSONDecoder").obj is json.decoder.JSONDecoder

    def test_live_root_namespace(self):
        """The default root is the running interpreter."""
        scope = SymbolResolver().resolve("json.decoder.JSONDecoder")
        assert scope.obj is json.decoder.JSONDecoder
        assert scope.qualified_name == "json.decoder.JSONDecoder"

    def test_live_root_missing_module(self):
        """Names that are neither loaded nor importable are errors."""
        with pytest.raises(ResolutionError):
            SymbolResolver().resolve("no_such_module_for_myprof_tests")

    @pytest.mark.parametrize("module,source,error", [
        ("myprof_fails_at_import", "raise RuntimeError('boom at import')\n", "RuntimeError"),
        ("myprof_bad_syntax", "def broken(:\n", "SyntaxError"),
    ])
    def test_live_root_module_failing_at_import(self, tmp_path, monkeypatch, module, source, error):
        """Whatever a module raises while being imported is a resolution failure."""
        (tmp_path / f"{module}.py").write_text(source)
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(ResolutionError) as exc_info:
            SymbolResolver().resolve(f"{module}.Codec")
        assert error in str(exc_info.value)
        assert exc_info.value.field_name == "exclude"


@pytest.mark.unit
class TestScopes:
    """Test cases for scope queries."""

    def test_ancestors_exclude_object(self):
        """Ancestors follow the MRO and stop before object."""
        ancestors = ObjectScope(Derived).ancestors()
        assert [scope.obj for scope in ancestors] == [Base]

    def test_module_has_no_ancestors(self):
        assert ObjectScope(json).ancestors() == []

    def test_instance_lookup_is_inherited(self):
        assert ObjectScope(Derived).find_function("helper") is Base.helper

    def test_class_level_lookup(self):
        class_level = ObjectScope(Derived).class_level()
        assert isinstance(class_level, ClassLevelScope)
        assert class_level.find_function("build") is vars(Derived)["build"].__func__
        assert class_level.find_function("util") is vars(Derived)["util"].__func__
        assert class_level.find_function("run") is None

    def test_module_functions_are_class_level(self):
        class_level = ObjectScope(json).class_level()
        assert class_level.find_function("dumps") is json.dumps


@pytest.mark.unit
class TestExclusionResolution:
    """Test cases for resolving --exclude entries."""

    def test_instance_method(self, resolver):
        """'#' selects an instance method."""
        target = resolver.resolve_exclusion("Derived#run")
        assert target.scope == ObjectScope(Derived)
        assert target.method == "run"
        assert target.function is Derived.run
        assert not target.is_class_level
        assert str(target).endswith("Derived#run")

    def test_inherited_instance_method(self, resolver):
        target = resolver.resolve_exclusion("Derived#helper")
        assert target.function is Base.helper

    def test_inherited_method_warns_that_function_is_shared(self, resolver, caplog):
        resolver.resolve_exclusion("Derived#helper")
        assert "Base.helper" in caplog.text
        assert "every class that shares it" in caplog.text

    def test_own_method_does_not_warn(self, resolver, caplog):
        resolver.resolve_exclusion("Derived#run")
        resolver.resolve_exclusion("Derived.build")
        assert "shares it" not in caplog.text

    def test_classmethod_is_class_level(self, resolver):
        """'.' selects the class-level companion."""
        target = resolver.resolve_exclusion("Derived.build")
        assert target.is_class_level
        assert target.separator == "."
        assert target.function is vars(Derived)["build"].__func__

    def test_staticmethod_is_class_level(self, resolver):
        assert resolver.resolve_exclusion("Derived.util").is_class_level

    def test_classmethod_is_not_an_instance_method(self, resolver):
        with pytest.raises(ResolutionError) as exc_info:
            resolver.resolve_exclusion("Derived#build")
        assert "instance method" in str(exc_info.value)

    def test_instance_method_is_not_class_level(self, resolver):
        with pytest.raises(ResolutionError):
            resolver.resolve_exclusion("Derived.run")

    def test_nested_scope(self, resolver):
        """The last separator splits scope from method."""
        target = resolver.resolve_exclusion("Outer.Inner#ping")
        assert target.function is Outer.Inner.ping

    def test_module_function(self, resolver):
        target = resolver.resolve_exclusion("json.dumps")
        assert target.is_class_level
        assert target.function is json.dumps

    def test_module_has_no_instance_methods(self, resolver):
        with pytest.raises(ResolutionError) as exc_info:
            resolver.resolve_exclusion("json#dumps")
        assert "module" in str(exc_info.value)

    @pytest.mark.parametrize("entry", ["A", "A#", "#m1", ".m1", "A#m1#"])
    def test_malformed_entries(self, resolver, entry):
        with pytest.raises(ResolutionError):
            resolver.resolve_exclusion(entry)

    def test_unknown_method(self, resolver):
        with pytest.raises(ResolutionError):
            resolver.resolve_exclusion("A#missing")

    def test_list_preserves_order(self, resolver):
        """Entries come back in command-line order."""
        targets = resolver.parse_exclusion_list("A#m1,B.m2")
        assert [(t.scope, t.is_class_level, t.method) for t in targets] == [
            (ObjectScope(Alpha), False, "m1"),
            (ClassLevelScope(ObjectScope(Beta)), True, "m2"),
        ]

    def test_list_drops_duplicates(self, resolver):
        targets = resolver.parse_exclusion_list("A#m1,B.m2,A#m1")
        assert [t.method for t in targets] == ["m1", "m2"]

    def test_list_with_empty_entry(self, resolver):
        with pytest.raises(ResolutionError):
            resolver.parse_exclusion_list("A#m1,,B.m2")

    def test_list_stops_at_first_failure(self, resolver):
        with pytest.raises(ResolutionError) as exc_info:
            resolver.parse_exclusion_list("A#m1,Missing#m,B.m2")
        assert exc_info.value.value == "Missing"
