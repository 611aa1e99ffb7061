"""
Grammar-specific configurations for tree-sitter parsing.

This module maps file extensions to tree-sitter grammars and provides the
AST node type tables the binder and type evaluator use to recognize
declarations, imports, exports, scopes and dotted accesses.

Supported Grammars:
    - TypeScript (.ts, .mts, .cts, .d.ts)
    - TSX (.tsx)
    - JavaScript (.js, .jsx, .mjs, .cjs)

Usage:
    >>> language = get_language_for_file("index.ts")
    >>> config = get_config_for_language(language)
    >>> 'import_statement' in config['import_types']
    True

Adding New Grammars:
    1. Add file extension mappings to EXTENSION_MAP
    2. Create a config dict with the required node types
    3. Add tests for the new grammar
"""

from typing import Any, Dict, Optional, Set
from pathlib import PurePosixPath


# ==============================================================================
# Extension to Grammar Mapping
# ==============================================================================

EXTENSION_MAP: Dict[str, str] = {
    # TypeScript
    '.ts': 'typescript',
    '.mts': 'typescript',  # TypeScript ES modules
    '.cts': 'typescript',  # TypeScript CommonJS modules
    '.tsx': 'tsx',

    # JavaScript (the javascript grammar parses JSX as well)
    '.js': 'javascript',
    '.jsx': 'javascript',
    '.mjs': 'javascript',  # ES6 modules
    '.cjs': 'javascript',  # CommonJS modules
}

# Probe order used by module resolution for extensionless specifiers
RESOLUTION_EXTENSIONS = ['.ts', '.tsx', '.d.ts', '.js', '.jsx', '.mjs', '.cjs', '.mts', '.cts']


# ==============================================================================
# Grammar Configurations
# ==============================================================================

LANGUAGE_CONFIGS: Dict[str, Dict[str, Any]] = {

    # --------------------------------------------------------------------------
    # TypeScript Configuration
    # --------------------------------------------------------------------------
    'typescript': {
        'import_types': [
            'import_statement',  # import { Foo } from './a';
        ],
        'export_types': [
            'export_statement',  # export ..., export default ..., export * from
        ],
        'variable_types': [
            'lexical_declaration',   # const / let
            'variable_declaration',  # var
        ],
        'function_types': [
            'function_declaration',
            'generator_function_declaration',
            'function_signature',  # overload / declare function
        ],
        'class_types': [
            'class_declaration',
            'abstract_class_declaration',
        ],
        'interface_types': [
            'interface_declaration',  # interface Foo { ... }
        ],
        'type_alias_types': [
            'type_alias_declaration',  # type Foo = ...
        ],
        'enum_types': [
            'enum_declaration',  # enum Foo { A, B = 2 }
        ],
        'namespace_types': [
            'internal_module',  # namespace Foo { ... }
            'module',           # module Foo { ... }
        ],
        'ambient_types': [
            'ambient_declaration',  # declare const Foo: number;
        ],
        'identifier_types': [
            'identifier',
            'type_identifier',  # names in type positions
        ],
        'property_access_types': [
            'member_expression',  # object.property
        ],
        'block_scope_types': [
            'program',
            'statement_block',
        ],
        'function_scope_types': [
            'function_declaration',
            'generator_function_declaration',
            'function',
            'function_expression',
            'generator_function',
            'arrow_function',
            'method_definition',
        ],
        'class_member_types': [
            'public_field_definition',  # static Bar = 1;
            'method_definition',        # static bar() {}
        ],
        'wrapper_expression_types': [
            'parenthesized_expression',
            'as_expression',
            'satisfies_expression',
            'non_null_expression',
            'type_assertion',
        ],

        # Examples of AST nodes:
        # import_statement:
        #   import_clause: identifier | namespace_import | named_imports
        #   source: string
        #
        # export_statement:
        #   declaration: declaration | value: expression
        #   export_clause | namespace_export | '*'
        #   source: string
        #
        # member_expression:
        #   object: expression
        #   property: property_identifier
    },

    # --------------------------------------------------------------------------
    # JavaScript Configuration
    # --------------------------------------------------------------------------
    'javascript': {
        'import_types': [
            'import_statement',
        ],
        'export_types': [
            'export_statement',
        ],
        'variable_types': [
            'lexical_declaration',
            'variable_declaration',
        ],
        'function_types': [
            'function_declaration',
            'generator_function_declaration',
        ],
        'class_types': [
            'class_declaration',
        ],
        'interface_types': [],
        'type_alias_types': [],
        'enum_types': [],
        'namespace_types': [],
        'ambient_types': [],
        'identifier_types': [
            'identifier',
        ],
        'property_access_types': [
            'member_expression',
        ],
        'block_scope_types': [
            'program',
            'statement_block',
        ],
        'function_scope_types': [
            'function_declaration',
            'generator_function_declaration',
            'function',
            'function_expression',
            'generator_function',
            'arrow_function',
            'method_definition',
        ],
        'class_member_types': [
            'field_definition',  # static Bar = 1; (name in 'property' field)
            'method_definition',
        ],
        'wrapper_expression_types': [
            'parenthesized_expression',
        ],
    },
}

# TSX shares the TypeScript node types
LANGUAGE_CONFIGS['tsx'] = dict(LANGUAGE_CONFIGS['typescript'])


# ==============================================================================
# Helper Functions
# ==============================================================================

def get_language_for_file(filepath: str) -> Optional[str]:
    """
    Determine the tree-sitter grammar from a file path.

    Args:
        filepath: Path to the file (can be relative or absolute)

    Returns:
        Grammar name (e.g., 'typescript', 'javascript') or None if not supported

    Examples:
        >>> get_language_for_file('/src/index.ts')
        'typescript'
        >>> get_language_for_file('Button.tsx')
        'tsx'
        >>> get_language_for_file('styles.css')
        None
    """
    extension = PurePosixPath(filepath.replace('\\', '/')).suffix.lower()
    return EXTENSION_MAP.get(extension)


def get_config_for_language(language: str) -> Dict[str, Any]:
    """
    Retrieve the node type configuration for a given grammar.

    Args:
        language: Grammar name (e.g., 'typescript', 'javascript')

    Returns:
        Configuration dictionary with node type mappings

    Raises:
        KeyError: If the grammar is not supported
    """
    if language not in LANGUAGE_CONFIGS:
        raise KeyError(
            f"Unsupported language: {language}. "
            f"Supported languages: {', '.join(LANGUAGE_CONFIGS.keys())}"
        )
    return LANGUAGE_CONFIGS[language]


def get_supported_extensions() -> Set[str]:
    """
    Get a set of all supported file extensions.

    Returns:
        Set of file extensions (including the dot)
    """
    return set(EXTENSION_MAP.keys())


def validate_config(language: str) -> bool:
    """
    Validate that a grammar configuration has all required fields.

    Args:
        language: Grammar name to validate

    Returns:
        True if configuration is valid

    Raises:
        ValueError: If configuration is missing required fields
    """
    required_fields = [
        'import_types',
        'export_types',
        'variable_types',
        'function_types',
        'class_types',
        'identifier_types',
        'property_access_types',
        'block_scope_types',
        'function_scope_types',
        'class_member_types',
        'wrapper_expression_types',
    ]

    config = get_config_for_language(language)
    missing_fields = [field for field in required_fields if field not in config]

    if missing_fields:
        raise ValueError(
            f"Configuration for {language} is missing required fields: {', '.join(missing_fields)}"
        )

    return True


# ==============================================================================
# Configuration Validation
# ==============================================================================

# Validate all configurations on module import
for lang in LANGUAGE_CONFIGS.keys():
    try:
        validate_config(lang)
    except ValueError as e:
        raise ValueError(f"Invalid configuration detected: {e}")
