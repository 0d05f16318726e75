import logging
import os
import re
import shutil
import subprocess
from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, List, Optional, Sequence

from olcontig.utils.user_error import UserError, AlignerError


class CommandWrapper(ABC):
    """ Wraps an external tool, and builds the command lines for it. """
    def __init__(self,
                 version: Optional[str],
                 execname: str,
                 logger: Optional[logging.Logger] = None,
                 ) -> None:

        path = shutil.which(execname)
        if path is None:
            raise UserError('Cannot find %r executable.', execname)

        self.path = Path(path)
        self._version: Optional[str] = version
        self._logger: Optional[logging.Logger] = logger
        if self._version is not None:
            self._validate_version(self.version)

    def build_args(self, args: Sequence[object]) -> List[str]:
        return [str(self.path)] + [str(arg) for arg in args]

    def create_process(self, args: Sequence[object] = (),
                       *popenargs: Any, **kwargs: Any) -> subprocess.Popen:
        """ Execute a child program in a new process.

        See subprocess.Popen class for details.
        @param args: a list of program arguments
        @param popenargs: other positional arguments to pass along
        @param kwargs: keyword arguments to pass along
        @return the new Popen object
        """
        kwargs.setdefault('universal_newlines', True)
        with open(os.devnull) as devnull:
            kwargs.setdefault('stdin', devnull)
            return subprocess.Popen(self.build_args(args), *popenargs, **kwargs)

    @property
    def logger(self) -> logging.Logger:
        """ Raise an exception if no logger is set for this command. """
        if self._logger is None:
            raise RuntimeError('logger not set for command {}'.format(self.path))
        return self._logger

    def log_call(self, args: Sequence[object], format_string: str = '%s') -> None:
        """ Launch a subprocess, and log any output to the debug logger.

        Raise AlignerError if the return code is not zero. This assumes only
        a small amount of output, and holds it all in memory before logging
        it. Logged output includes both stdout and stderr.
        @param args: A list of arguments for the command.
        @param format_string: A template for the debug message that will have
        each line of output formatted with it.
        """
        final_args = self.build_args(args)
        try:
            output = subprocess.check_output(final_args,
                                             stderr=subprocess.STDOUT,
                                             universal_newlines=True)
        except subprocess.CalledProcessError as ex:
            raise AlignerError(' '.join(final_args),
                               ex.returncode,
                               ex.output) from ex
        for line in output.splitlines():
            self.logger.debug(format_string, line)

    def redirect_call(self,
                      args: Sequence[object],
                      outpath: Path,
                      format_string: str = '%s') -> None:
        """ Launch a subprocess, and redirect the output to a file.

        Raise AlignerError if the return code is not zero, with standard
        error attached. Standard error is also logged to the debug logger.
        @param args: A list of arguments for the command.
        @param outpath: a filepath that stdout should be redirected to.
        @param format_string: A template for the debug message that will have
        each line of standard error formatted with it.
        """

        errors = []
        with open(outpath, 'w') as outfile:
            p = self.create_process(args, stdout=outfile, stderr=subprocess.PIPE)
            assert p.stderr is not None
            for line in p.stderr:
                errors.append(line)
                self.logger.debug(format_string, line.rstrip())
            p.wait()
            if p.returncode:
                raise AlignerError(' '.join(self.build_args(args)),
                                   p.returncode,
                                   ''.join(errors))

    @abstractmethod
    def get_version(self) -> str: ...

    def _validate_version(self, version_found: str) -> None:
        if self._version is None:
            pass
        elif self._version != version_found:
            raise UserError('%s version incompatibility: expected %s, found %s',
                            self.path,
                            self._version,
                            version_found)

    @cached_property
    def version(self) -> str:
        return self.get_version()


class Bwa(CommandWrapper):
    """ BWA, used to index the fragments and align them all against each other. """
    def __init__(self,
                 version: Optional[str] = None,
                 execname: str = 'bwa',
                 logger: Optional[logging.Logger] = None,
                 ):
        super(Bwa, self).__init__(version, execname, logger)

    def get_version(self) -> str:
        # Without arguments, bwa prints its usage and exits with an error.
        p = self.create_process([], stdout=subprocess.PIPE, stderr=subprocess.STDOUT)
        output, _ = p.communicate()
        match = re.search(r'^Version:\s*(\S+)', output, re.MULTILINE)
        if match is None:
            raise UserError('Cannot find the version of %s.', self.path)
        return match.group(1)

    def index(self, fasta: Path) -> None:
        self.log_call(['index', fasta], 'bwa index: %s')

    def mem(self, fasta: Path, sam_path: Path, threads: int = 1) -> None:
        """ Align every fragment in an indexed FASTA file against all of them.

        The -a option reports all alignments, not just the best one, so each
        fragment end gets every candidate overlap.
        """
        self.redirect_call(['mem', '-a', '-t', threads, fasta, fasta],
                           sam_path,
                           'bwa mem: %s')
