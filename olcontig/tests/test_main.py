import logging.config

import pytest

from olcontig.__main__ import main, parse_args
from olcontig.core.overlap_graph import DEFAULT_TERM_IGNORE_LENGTH


@pytest.fixture(autouse=True)
def keep_test_logging(monkeypatch):
    """ Leave pytest's log capture in place of the console handler. """
    monkeypatch.setattr(logging.config, 'dictConfig', lambda config: None)


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv('OLCONTIG_THREADS', raising=False)
    monkeypatch.delenv('OLCONTIG_BWA', raising=False)
    monkeypatch.delenv('OLCONTIG_WORK_DIR', raising=False)

    args = parse_args([str(tmp_path / 'fragments.fasta'), str(tmp_path / 'contigs.fasta')])

    assert args.term_ignore_length == DEFAULT_TERM_IGNORE_LENGTH
    assert args.min_length == 0
    assert args.threads == 1
    assert args.bwa == 'bwa'
    assert args.work_dir is None
    assert not args.skip_inconsistent
    args.contigs.close()


def test_environment_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv('OLCONTIG_THREADS', '4')
    monkeypatch.setenv('OLCONTIG_BWA', '/opt/bwa/bwa')
    monkeypatch.setenv('OLCONTIG_WORK_DIR', str(tmp_path))

    args = parse_args([str(tmp_path / 'fragments.fasta'), str(tmp_path / 'contigs.fasta')])

    assert args.threads == 4
    assert args.bwa == '/opt/bwa/bwa'
    assert args.work_dir == tmp_path
    args.contigs.close()


@pytest.mark.parametrize('option', ['--term-ignore-length=0', '--threads=0'])
def test_bad_option(tmp_path, option, capsys):
    with pytest.raises(SystemExit):
        parse_args([str(tmp_path / 'fragments.fasta'), '-', option])

    assert 'must be at least 1' in capsys.readouterr().err


def test_missing_fragments(tmp_path, caplog):
    contigs_path = tmp_path / 'contigs.fasta'

    code = main([str(tmp_path / 'missing.fasta'), str(contigs_path)])

    assert code == 1
    assert 'does not exist' in caplog.text


def test_bad_format(tmp_path, caplog):
    fragments_path = tmp_path / 'fragments.csv'
    fragments_path.write_text('F1,ACGT\n')

    code = main([str(fragments_path), str(tmp_path / 'contigs.fasta')])

    assert code == 1
    assert 'Unknown sequence format' in caplog.text


def test_missing_bwa(tmp_path, caplog):
    fragments_path = tmp_path / 'fragments.fasta'
    fragments_path.write_text('>F1\nACGT\n')

    code = main([str(fragments_path),
                 str(tmp_path / 'contigs.fasta'),
                 '--bwa', str(tmp_path / 'no-such-bwa')])

    assert code == 1
    assert 'Cannot find' in caplog.text
