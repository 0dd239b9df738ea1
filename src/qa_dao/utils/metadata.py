from importlib import metadata as importlib_metadata

DISTRIBUTION_NAME = "qa-dao"


def get_project_version(default: str = "unknown") -> str:
    """
    Return the installed version of the distribution, or `default` when the
    package runs from a source checkout that was never installed.
    """
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        return default


__all__ = ["DISTRIBUTION_NAME", "get_project_version"]
