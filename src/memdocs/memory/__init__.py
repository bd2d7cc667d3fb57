"""Docs memory items and their portable markdown form.

Layout of an exported directory:
    docs-export/
    ├── 2026-01-15_abcdef12.md        # <createdAt date>_<short id>.md
    └── 2026-01-16_deadbeef.md

Each file carries `id`, `kind`, `createdAt`, optional `tags` and `project`
in YAML frontmatter, followed by the note text.
"""
