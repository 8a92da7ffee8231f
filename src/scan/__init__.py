"""Source file discovery."""

from scan.files import expand_source_paths, find_ruby_files

__all__ = ["expand_source_paths", "find_ruby_files"]
