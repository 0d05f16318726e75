from typing import Optional


class UserError(RuntimeError):
    """
    Base class for all exceptions that are to be presented to a user.
    """

    def __init__(self, fmt: str, *fmt_args: object):
        self.fmt = fmt
        self.fmt_args = fmt_args
        self.code = 1
        super().__init__(fmt % fmt_args if fmt_args else fmt)


class SequenceFormatError(UserError):
    """ The fragment file is neither FASTA nor FASTQ. """


class DuplicateFragmentError(UserError):
    """ Two fragment records share an identifier. """

    def __init__(self, fragment_id: str, path: object):
        self.fragment_id = fragment_id
        super().__init__('Duplicate fragment id %r in %s.', fragment_id, path)


class AlignerError(UserError):
    """ The external aligner exited with an error. """

    def __init__(self, command: str, returncode: int, output: Optional[str]):
        self.returncode = returncode
        self.output = output or ''
        super().__init__('%s failed with exit code %d:\n%s',
                         command,
                         returncode,
                         self.output.rstrip())


class GraphInconsistency(RuntimeError):
    """
    The overlap graph broke one of its invariants, like a vertex with more
    than two neighbours, or a path through a fragment that was never loaded.
    """

    def __init__(self, message: str, vertex: object):
        self.vertex = vertex
        super().__init__(message)
