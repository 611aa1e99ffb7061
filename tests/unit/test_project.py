"""Unit tests for Project as a semantic host."""
import pytest
from origintrace.core.exceptions import ConfigurationError, HostError, ParseError
from origintrace.host.module_resolution import CompilerOptions
from origintrace.host.project import Project
from origintrace.resolution.tracer import trace_origin

from fake_host import FakeNode

A_TS = "/root/src/a.ts"
INDEX_TS = "/root/src/index.ts"


class TestConstruction:

    def test_default_options(self):
        project = Project()
        assert project.compiler_options.base_url is None
        assert project.get_source_files() == []

    def test_mapping_options(self):
        project = Project({"baseUrl": "/root", "paths": {"@lib/*": ["src/lib/*"]}})
        assert project.compiler_options.base_url == "/root"

    def test_options_instance(self):
        options = CompilerOptions(base_url="/root")
        assert Project(options).compiler_options is options

    def test_invalid_options(self):
        with pytest.raises(ConfigurationError, match="Unsupported compiler options"):
            Project(["baseUrl"])

    def test_paths_without_base(self):
        with pytest.raises(ConfigurationError, match="'paths' requires"):
            Project({"paths": {"@lib/*": ["src/lib/*"]}})


class TestSourceFiles:

    def test_create_and_lookup(self):
        project = Project()
        source_file = project.create_source_file("/root/src/../src/a.ts", "export const Foo = 1;")

        assert source_file.path == A_TS
        assert project.get_source_file(A_TS) is source_file
        assert project.get_source_file_or_throw(A_TS) is source_file
        assert source_file.get_full_text() == "export const Foo = 1;"

    def test_duplicate_path(self):
        project = Project()
        project.create_source_file(A_TS, "export const Foo = 1;")

        with pytest.raises(HostError, match="already exists"):
            project.create_source_file(A_TS, "export const Foo = 2;")

    def test_overwrite(self):
        project = Project()
        project.create_source_file(A_TS, "export const Foo = 1;")

        replaced = project.create_source_file(A_TS, "export const Foo = 2;", overwrite=True)

        assert project.get_source_file(A_TS) is replaced
        assert len(project.get_source_files()) == 1

    def test_unsupported_file_type(self):
        with pytest.raises(ParseError) as exc_info:
            Project().create_source_file("/root/styles.css", "body {}")
        assert exc_info.value.filepath == "/root/styles.css"

    def test_missing_file(self):
        project = Project()
        assert project.get_source_file(A_TS) is None
        with pytest.raises(HostError, match="not found"):
            project.get_source_file_or_throw(A_TS)

    def test_add_source_file_at_path(self, tmp_path):
        path = tmp_path / "a.ts"
        path.write_text("export const Foo = 1;\n")

        source_file = Project().add_source_file_at_path(path)

        assert source_file.path == path.as_posix()

    def test_add_source_file_at_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Project().add_source_file_at_path(tmp_path / "missing.ts")

    @pytest.mark.parametrize("parallel", [False, True])
    def test_add_source_files_from_directory(self, ts_project, parallel):
        events = []
        project = Project()

        added = project.add_source_files_from_directory(
            ts_project, parallel=parallel, max_workers=2,
            progress_callback=lambda event, data: events.append(event),
        )

        src = (ts_project / "src").as_posix()
        assert [f.path for f in added] == [f"{src}/index.ts", f"{src}/lib/a.ts", f"{src}/lib/index.ts"]
        assert events == ["file_loaded"] * 3

    def test_get_node_at(self, create_project):
        project = create_project([(INDEX_TS, "import { Foo } from './a';\nFoo;\n")])

        node = project.get_node_at(INDEX_TS, 2, 1)

        assert node.kind == "identifier"
        assert node.text == "Foo"
        assert node.line == 2


class TestFromTsconfig:

    def test_loads_options_and_files(self, ts_project):
        project = Project.from_tsconfig(ts_project / "tsconfig.json")

        assert project.compiler_options.paths == {"@lib/*": ["src/lib/*"]}
        assert len(project.get_source_files()) == 3

    def test_without_files(self, ts_project):
        project = Project.from_tsconfig(ts_project / "tsconfig.json", load_files=False)
        assert project.get_source_files() == []

    def test_missing_config(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Project.from_tsconfig(tmp_path / "tsconfig.json")


class TestSemanticQueries:

    def test_resolve_module(self, create_project):
        project = create_project([(A_TS, "export const Foo = 1;"), (INDEX_TS, "")])

        assert project.resolve_module("./a", INDEX_TS) is project.get_source_file(A_TS)
        assert project.resolve_module("src/a", INDEX_TS) is project.get_source_file(A_TS)
        assert project.resolve_module("react", INDEX_TS) is None

    def test_foreign_node(self, create_project):
        project = create_project([(A_TS, "export const Foo = 1;")])

        with pytest.raises(HostError):
            project.get_binding(FakeNode("identifier", "Foo"))

    def test_node_of_other_project(self, create_project):
        first = create_project([(A_TS, "export const Foo = 1;")])
        second = create_project([(A_TS, "export const Foo = 1;")])
        node = first.get_source_file(A_TS).find_identifier("Foo")

        with pytest.raises(HostError):
            second.get_binding(node)

    def test_node_of_replaced_file(self, create_project):
        project = create_project([(A_TS, "export const Foo = 1;\nFoo;\n")])
        stale = project.get_source_file(A_TS).find_identifier("Foo")
        project.create_source_file(A_TS, "export const Bar = 1;\n", overwrite=True)

        with pytest.raises(HostError, match="replaced"):
            project.get_binding(stale)
        assert trace_origin(stale) is None

    def test_binding_after_new_file(self, create_project):
        project = create_project([(INDEX_TS, "import { Foo } from './a';\nFoo;\n")])
        use_site = project.get_source_file(INDEX_TS).find_identifier("Foo")
        assert trace_origin(use_site) is None

        project.create_source_file(A_TS, "export const Foo = 1;\n")

        assert trace_origin(use_site) == A_TS
