from userdesk.api.directory import DirectoryClient

__all__ = ["DirectoryClient"]
