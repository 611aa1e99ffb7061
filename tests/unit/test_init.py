
import pytest

def test_lazy_import_trace_origin():
    import origintrace
    assert callable(origintrace.trace_origin)

def test_lazy_import_origin_tracer():
    import origintrace
    assert hasattr(origintrace, 'OriginTracer')

def test_lazy_import_project():
    import origintrace
    assert hasattr(origintrace, 'Project')

def test_lazy_import_compiler_options():
    import origintrace
    assert hasattr(origintrace, 'CompilerOptions')

def test_lazy_import_treesitter_parser():
    import origintrace
    assert hasattr(origintrace, 'TreeSitterParser')

def test_lazy_import_options_and_result():
    import origintrace
    assert origintrace.TraceOriginOptions().relative is False
    assert not origintrace.OriginResult().found

def test_lazy_import_isemantichost():
    import origintrace
    assert hasattr(origintrace, 'ISemanticHost')

def test_lazy_import_invalid_name():
    import origintrace
    with pytest.raises(AttributeError):
        _ = origintrace.NonExistentClass

def test_all_exported_names_are_accessible():
    import origintrace
    for name in origintrace.__all__:
        assert hasattr(origintrace, name)
