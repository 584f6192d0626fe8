import io
import json
import sys

import pytest

import sha3_primitives
from sha3_primitives import main


def _feed_stdin(monkeypatch, data):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))


def test_digest_defaults_to_sha3_256(monkeypatch, capsys):
    _feed_stdin(monkeypatch, b"")
    assert main(["digest"]) == 0
    assert capsys.readouterr().out == (
        "a7ffc6f8bf1ed76651c14756a061d662f580ff4de43b49fa82d80a4b80f8434a"
    )


def test_digest_with_variant(monkeypatch, capsys):
    _feed_stdin(monkeypatch, b"abc")
    assert main(["digest", "--variant", "sha3-224"]) == 0
    assert capsys.readouterr().out == "e642824c3f8cf24ad09234ee7d3c766fc9a3a5168d0c94ad73b46fdf"


def test_digest_rejects_unknown_variant(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["digest", "--variant", "md5"])
    assert excinfo.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_self_test_command(capsys):
    assert main(["self-test"]) == 0
    assert capsys.readouterr().out == "ok\n"


def test_self_test_command_reports_failure(monkeypatch, capsys):
    broken = (
        {
            "name": "sha3-256/broken",
            "variant": "sha3-256",
            "input_hex": "",
            "digest_hex": "00" * 32,
        },
    )
    monkeypatch.setattr(sha3_primitives, "_CANONICAL_VECTORS", broken)
    assert main(["self-test"]) == 1
    assert "sha3-256/broken" in capsys.readouterr().err


def test_vectors_command(capsys):
    assert main(["vectors"]) == 0
    vectors = json.loads(capsys.readouterr().out)
    assert len(vectors) == 8
    assert {v["variant"] for v in vectors} == set(sha3_primitives.SHA3_VARIANTS)
    for vector in vectors:
        digest = sha3_primitives.sha3_hex(vector["variant"], bytes.fromhex(vector["input_hex"]))
        assert digest == vector["digest_hex"]


def test_command_is_required(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
