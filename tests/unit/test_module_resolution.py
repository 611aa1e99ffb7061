"""Unit tests for compiler options and module specifier resolution."""
import logging

import pytest
from origintrace.core.exceptions import ConfigurationError
from origintrace.host.module_resolution import (
    CompilerOptions,
    ModuleResolver,
    PathAlias,
    canonical_path,
    load_compiler_options,
    strip_jsonc,
)


def resolver_for(files, **options):
    return ModuleResolver(CompilerOptions(**options), set(files).__contains__)


class TestPathAlias:

    def test_wildcard_match(self):
        alias = PathAlias("@lib/*", ["src/lib/*"])
        assert alias.is_wildcard
        assert alias.matches("@lib/a") == "a"
        assert alias.matches("@lib/deep/b") == "deep/b"
        assert alias.matches("@other/a") is None

    def test_wildcard_with_suffix(self):
        alias = PathAlias("@styles/*.css", ["src/styles/*.css"])
        assert alias.matches("@styles/main.css") == "main"
        assert alias.matches("@styles/main.scss") is None

    def test_exact_match(self):
        alias = PathAlias("#config", ["src/config.ts"])
        assert not alias.is_wildcard
        assert alias.matches("#config") == ""
        assert alias.matches("#config/x") is None

    def test_apply(self):
        alias = PathAlias("@lib/*", ["src/lib/*", "vendor/lib/*", "fallback.ts"])
        assert alias.apply("a") == ["src/lib/a", "vendor/lib/a", "fallback.ts"]

    def test_multiple_wildcards_rejected(self):
        with pytest.raises(ConfigurationError, match="at most one"):
            PathAlias("@*/*", ["src/*/*"])


class TestCompilerOptions:

    def test_from_dict_camel_case(self):
        options = CompilerOptions.from_dict({"baseUrl": "/root", "paths": {"@lib/*": ["src/lib/*"]}})
        assert options.base_url == "/root"
        assert options.paths == {"@lib/*": ["src/lib/*"]}
        assert options.paths_base == "/root"

    def test_from_dict_snake_case(self):
        options = CompilerOptions.from_dict({"base_url": "/root/", "config_dir": "/repo"})
        assert options.base_url == "/root"
        assert options.config_dir == "/repo"

    def test_from_none(self):
        options = CompilerOptions.from_dict(None)
        assert options.base_url is None
        assert options.paths == {}
        assert options.paths_base is None

    def test_paths_base_falls_back_to_config_dir(self):
        assert CompilerOptions(config_dir="/repo").paths_base == "/repo"

    def test_invalid_targets(self):
        with pytest.raises(ConfigurationError, match="list of strings"):
            CompilerOptions(paths={"@lib/*": "src/lib/*"})

    def test_path_aliases_most_specific_first(self):
        options = CompilerOptions(paths={
            "@/*": ["src/*"],
            "@lib/*": ["src/lib/*"],
            "#config": ["src/config.ts"],
        })
        assert [a.pattern for a in options.path_aliases] == ["#config", "@lib/*", "@/*"]


class TestCanonicalPath:

    def test_normalizes_separators_and_dots(self):
        assert canonical_path("/root/src/../lib/./a.ts") == "/root/lib/a.ts"
        assert canonical_path("C:\\repo\\src\\a.ts") == "C:/repo/src/a.ts"

    def test_relative_is_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert canonical_path("src/a.ts") == (tmp_path / "src" / "a.ts").as_posix()


class TestStripJsonc:

    def test_comments_and_trailing_commas(self):
        text = '{\n  // line\n  "a": [1, 2,], /* block */\n  "b": {"c": 3,},\n}'
        assert strip_jsonc(text).replace(" ", "").replace("\n", "") == '{"a":[1,2],"b":{"c":3}}'

    def test_strings_are_preserved(self):
        text = '{"url": "http://example.com/*x*/", "quote": "a\\"//b", "comma": ",}"}'
        assert strip_jsonc(text) == text


class TestLoadCompilerOptions:

    def test_base_url_and_paths(self, ts_project):
        options = load_compiler_options(str(ts_project / "tsconfig.json"))

        assert options.base_url == ts_project.as_posix()
        assert options.paths == {"@lib/*": ["src/lib/*"]}
        assert options.config_dir == ts_project.as_posix()

    def test_paths_without_base_url(self, tmp_path):
        (tmp_path / "tsconfig.json").write_text('{"compilerOptions": {"paths": {"~/*": ["./src/*"]}}}')

        options = load_compiler_options(str(tmp_path / "tsconfig.json"))

        assert options.base_url is None
        assert options.paths_base == tmp_path.as_posix()

    def test_extends_inherits_options(self, tmp_path):
        (tmp_path / "configs").mkdir()
        (tmp_path / "configs" / "base.json").write_text(
            '{"compilerOptions": {"baseUrl": "..", "paths": {"@lib/*": ["src/lib/*"]}}}'
        )
        (tmp_path / "tsconfig.json").write_text('{"extends": "./configs/base"}')

        options = load_compiler_options(str(tmp_path / "tsconfig.json"))

        assert options.base_url == tmp_path.as_posix()
        assert options.paths == {"@lib/*": ["src/lib/*"]}
        assert options.config_dir == (tmp_path / "configs").as_posix()

    def test_extending_file_wins(self, tmp_path):
        (tmp_path / "base.json").write_text('{"compilerOptions": {"baseUrl": "./old", "paths": {"@old/*": ["old/*"]}}}')
        (tmp_path / "tsconfig.json").write_text(
            '{"extends": "./base.json", "compilerOptions": {"paths": {"@new/*": ["new/*"]}}}'
        )

        options = load_compiler_options(str(tmp_path / "tsconfig.json"))

        assert options.base_url == (tmp_path / "old").as_posix()
        assert options.paths == {"@new/*": ["new/*"]}

    def test_package_extends_is_ignored(self, tmp_path, caplog):
        (tmp_path / "tsconfig.json").write_text('{"extends": "@tsconfig/node18/tsconfig.json"}')

        with caplog.at_level(logging.WARNING):
            options = load_compiler_options(str(tmp_path / "tsconfig.json"))

        assert options.paths == {}
        assert "Ignoring package 'extends'" in caplog.text

    def test_circular_extends(self, tmp_path):
        (tmp_path / "a.json").write_text('{"extends": "./b.json"}')
        (tmp_path / "b.json").write_text('{"extends": "./a.json"}')

        with pytest.raises(ConfigurationError, match="Circular"):
            load_compiler_options(str(tmp_path / "a.json"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_compiler_options(str(tmp_path / "tsconfig.json"))

    def test_malformed_file(self, tmp_path):
        (tmp_path / "tsconfig.json").write_text('{"compilerOptions": ')

        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_compiler_options(str(tmp_path / "tsconfig.json"))


class TestModuleResolver:

    def test_relative_with_extension_probe(self):
        resolver = resolver_for(["/root/src/a.ts"])
        assert resolver.resolve("./a", "/root/src/index.ts") == "/root/src/a.ts"

    def test_parent_directory(self):
        resolver = resolver_for(["/root/src/a.ts"])
        assert resolver.resolve("../a", "/root/src/sub/index.ts") == "/root/src/a.ts"

    def test_typescript_preferred_over_javascript(self):
        resolver = resolver_for(["/root/src/a.js", "/root/src/a.ts"])
        assert resolver.resolve("./a", "/root/src/index.ts") == "/root/src/a.ts"

    def test_explicit_extension(self):
        resolver = resolver_for(["/root/src/a.js", "/root/src/a.ts"])
        assert resolver.resolve("./a.js", "/root/src/index.ts") == "/root/src/a.js"

    def test_js_specifier_maps_to_typescript_source(self):
        resolver = resolver_for(["/root/src/a.ts"])
        assert resolver.resolve("./a.js", "/root/src/index.ts") == "/root/src/a.ts"

    def test_declaration_file(self):
        resolver = resolver_for(["/root/src/types.d.ts"])
        assert resolver.resolve("./types", "/root/src/index.ts") == "/root/src/types.d.ts"

    def test_directory_index(self):
        resolver = resolver_for(["/root/src/lib/index.ts"])
        assert resolver.resolve("./lib", "/root/src/index.ts") == "/root/src/lib/index.ts"
        assert resolver.resolve(".", "/root/src/lib/a.ts") == "/root/src/lib/index.ts"

    def test_absolute_specifier(self):
        resolver = resolver_for(["/root/src/a.ts"])
        assert resolver.resolve("/root/src/a", "/root/other/index.ts") == "/root/src/a.ts"

    def test_paths_alias(self):
        resolver = resolver_for(["/root/src/lib/a.ts"], base_url="/root", paths={"@lib/*": ["src/lib/*"]})
        assert resolver.resolve("@lib/a", "/root/src/index.ts") == "/root/src/lib/a.ts"

    def test_paths_fallback_target(self):
        resolver = resolver_for(
            ["/root/vendor/lib/a.ts"],
            base_url="/root",
            paths={"@lib/*": ["src/lib/*", "vendor/lib/*"]},
        )
        assert resolver.resolve("@lib/a", "/root/src/index.ts") == "/root/vendor/lib/a.ts"

    def test_paths_relative_to_config_dir(self):
        resolver = resolver_for(["/repo/src/a.ts"], config_dir="/repo", paths={"~/*": ["./src/*"]})
        assert resolver.resolve("~/a", "/repo/src/index.ts") == "/repo/src/a.ts"

    def test_paths_without_base_is_rejected(self):
        with pytest.raises(ConfigurationError, match="'paths' requires 'baseUrl'"):
            resolver_for(["/root/src/lib/a.ts"], paths={"@lib/*": ["src/lib/*"]})

    def test_base_url(self):
        resolver = resolver_for(["/root/src/a.ts"], base_url="/root")
        assert resolver.resolve("src/a", "/root/src/index.ts") == "/root/src/a.ts"

    def test_bare_package_is_unresolved(self):
        resolver = resolver_for(["/root/src/a.ts"], base_url="/root")
        assert resolver.resolve("react", "/root/src/index.ts") is None

    def test_missing_relative_file(self):
        resolver = resolver_for([])
        assert resolver.resolve("./missing", "/root/src/index.ts") is None
