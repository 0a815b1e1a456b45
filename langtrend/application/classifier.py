from __future__ import annotations

# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------
# Extensions are stored lower-case; classify() lower-cases before lookup.
# Names follow GitHub Linguist so tree-based snapshots line up with the
# /languages endpoint used for the account-wide report.

EXT_TO_LANGUAGE: dict[str, str] = {
    # JavaScript / TypeScript
    ".js": "JavaScript", ".jsx": "JavaScript", ".mjs": "JavaScript", ".cjs": "JavaScript",
    ".ts": "TypeScript", ".tsx": "TypeScript", ".mts": "TypeScript", ".cts": "TypeScript",
    # Python
    ".py": "Python", ".pyw": "Python", ".pyi": "Python",
    # JVM
    ".java": "Java", ".kt": "Kotlin", ".kts": "Kotlin", ".scala": "Scala", ".clj": "Clojure",
    # C family
    ".c": "C", ".h": "C",
    ".cpp": "C++", ".cc": "C++", ".cxx": "C++", ".hpp": "C++", ".hxx": "C++",
    ".cs": "C#", ".m": "Objective-C", ".mm": "Objective-C",
    # Systems
    ".go": "Go", ".rs": "Rust", ".zig": "Zig",
    # Web
    ".html": "HTML", ".htm": "HTML",
    ".css": "CSS", ".less": "CSS", ".scss": "SCSS", ".sass": "SCSS",
    ".vue": "Vue", ".svelte": "Svelte",
    # Scripting
    ".rb": "Ruby", ".php": "PHP", ".pl": "Perl", ".pm": "Perl",
    ".lua": "Lua", ".r": "R",
    ".sh": "Shell", ".bash": "Shell", ".zsh": "Shell", ".fish": "Shell",
    ".ps1": "PowerShell", ".psm1": "PowerShell",
    ".vim": "Vim Script", ".nix": "Nix",
    # Mobile
    ".swift": "Swift", ".dart": "Dart",
    # Functional and the rest
    ".ex": "Elixir", ".exs": "Elixir", ".erl": "Erlang", ".hs": "Haskell",
    ".ml": "OCaml", ".fs": "F#", ".fsx": "F#",
    ".jl": "Julia", ".nim": "Nim", ".v": "V", ".cr": "Crystal",
    # Data / config
    ".json": "JSON", ".yaml": "YAML", ".yml": "YAML", ".toml": "TOML", ".xml": "XML",
    ".sql": "SQL", ".graphql": "GraphQL", ".gql": "GraphQL",
    # Markup / docs
    ".md": "Markdown", ".mdx": "Markdown", ".rst": "reStructuredText", ".tex": "TeX",
    # DevOps
    ".dockerfile": "Dockerfile", ".tf": "HCL", ".hcl": "HCL", ".cmake": "CMake",
    # Assembly
    ".asm": "Assembly", ".s": "Assembly",
    # Notebooks
    ".ipynb": "Jupyter Notebook",
}

# Exact file names that carry no useful extension.
FILENAME_TO_LANGUAGE: dict[str, str] = {
    "Dockerfile":     "Dockerfile",
    "Containerfile":  "Dockerfile",
    "Makefile":       "Makefile",
    "GNUmakefile":    "Makefile",
    "CMakeLists.txt": "CMake",
    "Gemfile":        "Ruby",
    "Rakefile":       "Ruby",
    "Vagrantfile":    "Ruby",
}


def classify(path: str) -> str | None:
    """
    Return the language of the file at `path`, or None if it is not code
    we track (images, lock files, READMEs without an extension ...).

    >>> classify("src/main.rs")
    'Rust'
    >>> classify("docker/Dockerfile")
    'Dockerfile'
    >>> classify("README") is None
    True
    """
    filename = path.rsplit("/", 1)[-1]

    special = FILENAME_TO_LANGUAGE.get(filename)
    if special is not None:
        return special

    dot = filename.rfind(".")
    if dot == -1:
        return None
    return EXT_TO_LANGUAGE.get(filename[dot:].lower())
