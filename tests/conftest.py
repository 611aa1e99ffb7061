import pytest
from origintrace.host.project import Project


@pytest.fixture
def create_project():
    """Build an in-memory project from (path, content) pairs.

    Compiler options default to ``baseUrl: /root``; extra options are merged in.
    """
    def _create(files, **compiler_options):
        options = {"baseUrl": "/root"}
        options.update(compiler_options)
        project = Project(options)
        for path, content in files:
            project.create_source_file(path, content)
        return project
    return _create


@pytest.fixture
def find_identifier():
    """Return the first identifier spelled ``text`` in a file."""
    def _find(project, file_path, text):
        node = project.get_source_file_or_throw(file_path).find_identifier(text)
        assert node is not None, f"identifier {text!r} not found in {file_path}"
        return node
    return _find


@pytest.fixture
def find_property_access():
    """Return the first dotted access expression in a file."""
    def _find(project, file_path):
        node = project.get_source_file_or_throw(file_path).find_property_access()
        assert node is not None, f"no property access in {file_path}"
        return node
    return _find


@pytest.fixture
def ts_project(tmp_path):
    """Create a small TypeScript project on disk."""
    src = tmp_path / "src"
    (src / "lib").mkdir(parents=True)
    (src / "lib" / "a.ts").write_text("export const Foo = 1;\n")
    (src / "lib" / "index.ts").write_text("export * from './a';\n")
    (src / "index.ts").write_text("import { Foo } from '@lib/index';\nFoo;\n")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("module.exports = 1;\n")
    (tmp_path / "tsconfig.json").write_text('''{
  // project settings
  "compilerOptions": {
    "baseUrl": ".",
    "paths": {
      "@lib/*": ["src/lib/*"],
    },
  },
}
''')
    return tmp_path
