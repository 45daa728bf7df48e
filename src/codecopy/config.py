# src/codecopy/config.py
from types import MappingProxyType

TOKEN_LIMIT = 10_000

FALLBACK_FILENAME = "code_context.txt"
IGNORE_FILENAME = ".codecopyignore"

ISSUES_URL = "https://github.com/codecopy/codecopy/issues"

UNKNOWN_LANGUAGE = "Unknown"

LANGUAGE_EXTENSIONS = MappingProxyType({
    "Go": frozenset({
        ".go", ".mod", ".sum", ".toml", ".yaml", ".yml", ".json", ".md", ".txt",
    }),
    "Python": frozenset({
        ".py", ".pyc", ".pyd", ".pyo", ".pyw", ".pyz", ".pyi", ".ini", ".toml",
        ".yaml", ".yml", ".json", ".md", ".txt",
    }),
    "JavaScript/TypeScript": frozenset({
        ".js", ".mjs", ".cjs", ".ts", ".tsx", ".jsx", ".es6", ".es", ".json",
        ".jsonc", ".json5", ".css", ".scss", ".sass", ".less", ".styl", ".html",
        ".htm", ".xhtml", ".vue", ".svelte", ".angular", ".yaml", ".yml", ".toml",
        ".ini", ".md", ".txt",
    }),
    "Rust": frozenset({
        ".rs", ".toml", ".lock", ".yaml", ".yml", ".json", ".md", ".txt",
    }),
    "PHP": frozenset({
        ".php", ".phtml", ".php3", ".php4", ".php5", ".php7", ".phps", ".ini",
        ".json", ".xml", ".yaml", ".yml", ".toml", ".md", ".txt",
    }),
    "Java": frozenset({
        ".java", ".class", ".jar", ".xml", ".json", ".yaml", ".yml", ".toml",
        ".md", ".txt",
    }),
    "Ruby": frozenset({
        ".rb", ".rbw", ".rake", ".gemspec", ".ru", ".erb", ".yml", ".yaml",
        ".json", ".toml", ".md", ".txt",
    }),
    "C#": frozenset({
        ".cs", ".csx", ".sln", ".csproj", ".vbproj", ".xml", ".json", ".yaml",
        ".yml", ".toml", ".md", ".txt",
    }),
})

# Only these extensions vote during project type detection
DETECTION_EXTENSIONS = MappingProxyType({
    ".go": "Go",
    ".py": "Python",
    ".js": "JavaScript/TypeScript",
    ".ts": "JavaScript/TypeScript",
    ".rs": "Rust",
    ".php": "PHP",
})

# CLI flag -> language tag
LANGUAGE_FLAGS = MappingProxyType({
    "-py": "Python",
    "-rs": "Rust",
    "-go": "Go",
    "-js": "JavaScript/TypeScript",
    "-php": "PHP",
    "-java": "Java",
    "-rb": "Ruby",
    "-cs": "C#",
})

IGNORED_DIRS = (
    "node_modules", ".git", ".vscode", ".idea", "__pycache__", "venv", "vendor",
    "build", "dist", "bin", "obj", "target", "debug", "release", "tmp", "temp",
    "cache", "logs", "log",
)
