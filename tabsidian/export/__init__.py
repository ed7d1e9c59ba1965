"""Tab context building, frontmatter and delivery helpers."""
