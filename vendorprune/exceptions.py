"Exceptions which are raised out of vendorprune."
import os
import typing as t

class GoSyntaxError(Exception):
    "A Go source file couldn't be parsed far enough for what we asked for."
    def __init__(self, filename: t.Union[str, os.PathLike], line: int, message: str="syntax error") -> None:
        super().__init__(f"{os.fsdecode(filename)}:{line}: {message}")
        self.filename = filename
        self.line = line

class ConfigurationError(Exception):
    """The environment doesn't let us work out the root package.

    This is raised before any work starts, so nothing has been touched on disk.

    """
    pass

class PruneError(Exception):
    """Some deletions failed while pruning the target directory.

    Deletions which succeeded before or after the failures have still taken
    effect; `errors` holds every failure, in the order they happened.

    """
    def __init__(self, errors: t.Sequence[OSError]) -> None:
        super().__init__(f"{len(errors)} error(s) while pruning: " + "; ".join(str(e) for e in errors))
        self.errors = list(errors)
