from .directory_service import DirectoryService, parse_roles

__all__ = ["DirectoryService", "parse_roles"]
