import logging

import pytest

from olcontig.utils.externals import Bwa
from olcontig.utils.user_error import UserError, AlignerError

FAKE_BWA = """\
#!/bin/sh
if [ $# -eq 0 ]; then
    echo "Program: bwa (alignment via Burrows-Wheeler transformation)" >&2
    echo "Version: 0.7.17-r1188" >&2
    exit 1
fi
if [ -n "$FAKE_BWA_FAIL" ]; then
    echo "[$1] $FAKE_BWA_FAIL" >&2
    exit 2
fi
echo "[$1] working" >&2
echo "$@"
"""

logger = logging.getLogger(__name__)


@pytest.fixture
def fake_bwa(tmp_path):
    script_path = tmp_path / 'bwa'
    script_path.write_text(FAKE_BWA)
    script_path.chmod(0o755)
    return script_path


def test_version(fake_bwa):
    bwa = Bwa(execname=str(fake_bwa))

    assert bwa.version == '0.7.17-r1188'
    assert bwa.path == fake_bwa


def test_version_matches(fake_bwa):
    bwa = Bwa(version='0.7.17-r1188', execname=str(fake_bwa))

    assert bwa.version == '0.7.17-r1188'


def test_version_mismatch(fake_bwa):
    with pytest.raises(UserError, match='version incompatibility'):
        Bwa(version='0.7.18', execname=str(fake_bwa))


def test_missing_executable(tmp_path):
    with pytest.raises(UserError, match='Cannot find'):
        Bwa(execname=str(tmp_path / 'no-such-bwa'))


def test_index(fake_bwa, tmp_path, caplog):
    bwa = Bwa(execname=str(fake_bwa), logger=logger)
    fasta_path = tmp_path / 'fragments.fasta'

    with caplog.at_level(logging.DEBUG, logger=__name__):
        bwa.index(fasta_path)

    assert f'bwa index: index {fasta_path}' in caplog.messages


def test_mem(fake_bwa, tmp_path, caplog):
    bwa = Bwa(execname=str(fake_bwa), logger=logger)
    fasta_path = tmp_path / 'fragments.fasta'
    sam_path = tmp_path / 'overlaps.sam'

    with caplog.at_level(logging.DEBUG, logger=__name__):
        bwa.mem(fasta_path, sam_path, threads=3)

    assert sam_path.read_text() == f'mem -a -t 3 {fasta_path} {fasta_path}\n'
    assert 'bwa mem: [mem] working' in caplog.messages


def test_mem_fails(fake_bwa, tmp_path, monkeypatch):
    monkeypatch.setenv('FAKE_BWA_FAIL', 'fail to locate the index files')
    bwa = Bwa(execname=str(fake_bwa), logger=logger)

    with pytest.raises(AlignerError) as context:
        bwa.mem(tmp_path / 'fragments.fasta', tmp_path / 'overlaps.sam')

    assert context.value.returncode == 2
    assert context.value.output == '[mem] fail to locate the index files\n'
    assert 'failed with exit code 2' in str(context.value)


def test_index_fails(fake_bwa, tmp_path, monkeypatch):
    monkeypatch.setenv('FAKE_BWA_FAIL', 'not a FASTA file')
    bwa = Bwa(execname=str(fake_bwa), logger=logger)

    with pytest.raises(AlignerError, match=r'\[index\] not a FASTA file'):
        bwa.index(tmp_path / 'fragments.fasta')
