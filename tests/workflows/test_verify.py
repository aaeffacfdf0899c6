"""Tests for the download-and-verify workflow."""

import hashlib
import io
from pathlib import Path
from unittest.mock import MagicMock

import orjson
import pgpy
import pytest

from dl_verify.core.gpg import KeyLength, KeyServerInformation
from dl_verify.core.verification import ExpectedDigestSet
from dl_verify.domain.types import GlobalConfig
from dl_verify.exceptions import (
    GpgKeyInsecureError,
    InvalidHashLengthError,
    KeyNotFoundError,
    MultipleKeysReturnedError,
    OutputError,
)
from dl_verify.workflows import VerifyRequest, VerifyWorkflow
from tests.core.conftest import make_download_response, make_key_response

URL = "https://downloads.example.org/tool-2.1.tar.gz"
CONTENT = b"release tarball contents\n" * 100
SHA256 = hashlib.sha256(CONTENT).hexdigest()
MD5 = hashlib.md5(CONTENT).hexdigest()  # noqa: S324
KEY_SERVERS = KeyServerInformation(key_servers=["keys.example.org"])


class FakeSession:
    """Routes artifact and key server requests to canned responses."""

    def __init__(self, key_response=None) -> None:
        self.get = MagicMock(side_effect=self._get)
        self.key_response = key_response
        self.key_requests: list[str] = []

    def _get(self, url: str, **_kwargs):
        if "/pks/lookup" in url:
            self.key_requests.append(url)
            return self.key_response
        return make_download_response([CONTENT[:1000], CONTENT[1000:]])


@pytest.fixture
def workflow(global_config: GlobalConfig) -> VerifyWorkflow:
    """Provide a workflow with single-attempt downloads."""
    return VerifyWorkflow(global_config)


@pytest.mark.asyncio
async def test_valid_checksum_emits_artifact(workflow: VerifyWorkflow):
    """Test a matching checksum releases the artifact."""
    session = FakeSession()
    output = io.BytesIO()

    report = await workflow.execute(
        VerifyRequest(URL, ExpectedDigestSet(sha256=SHA256)),
        output,
        session=session,
    )

    assert report.verified
    assert report.emitted
    assert report.bytes_written == len(CONTENT)
    assert output.getvalue() == CONTENT
    assert report.checksums.valid == ("SHA256",)


@pytest.mark.asyncio
async def test_mismatch_emits_nothing(workflow: VerifyWorkflow):
    """Test one mismatching checksum blocks the release."""
    session = FakeSession()
    output = io.BytesIO()

    report = await workflow.execute(
        VerifyRequest(URL, ExpectedDigestSet(sha256=SHA256, md5="0" * 32)),
        output,
        session=session,
    )

    assert not report.verified
    assert not report.emitted
    assert report.checksums.invalid == ("MD5",)
    assert output.getvalue() == b""


@pytest.mark.asyncio
async def test_mismatch_skips_key_lookup(
    workflow: VerifyWorkflow, key_fingerprint_hex: str
):
    """Test the key is not looked up once a checksum failed."""
    session = FakeSession()

    report = await workflow.execute(
        VerifyRequest(
            URL,
            ExpectedDigestSet(md5="0" * 32),
            gpg_key=key_fingerprint_hex,
            key_server_info=KEY_SERVERS,
        ),
        io.BytesIO(),
        session=session,
    )

    assert report.checksums.is_invalid
    assert report.key is None
    assert session.key_requests == []


@pytest.mark.asyncio
async def test_no_checksums_is_not_verified(workflow: VerifyWorkflow):
    """Test a run without checksums does not release the artifact."""
    output = io.BytesIO()

    report = await workflow.execute(
        VerifyRequest(URL), output, session=FakeSession()
    )

    assert report.checksums.is_noop
    assert not report.verified
    assert output.getvalue() == b""


@pytest.mark.asyncio
async def test_checksum_and_key(
    workflow: VerifyWorkflow,
    armored_key: str,
    key_fingerprint_hex: str,
):
    """Test the key is resolved and the verified artifact released."""
    session = FakeSession(make_key_response(armored_key))
    output = io.BytesIO()

    report = await workflow.execute(
        VerifyRequest(
            URL,
            ExpectedDigestSet(sha256=SHA256),
            gpg_key=f"0x{key_fingerprint_hex.lower()}",
            key_server_info=KEY_SERVERS,
        ),
        output,
        session=session,
    )

    assert report.key is not None
    assert output.getvalue() == CONTENT
    assert len(session.key_requests) == 1
    assert session.key_requests[0].startswith(
        "https://keys.example.org/pks/lookup?"
    )


@pytest.mark.asyncio
async def test_key_alone_does_not_verify(
    workflow: VerifyWorkflow, armored_key: str, key_fingerprint_hex: str
):
    """Test resolving a key without checksums releases nothing."""
    output = io.BytesIO()

    report = await workflow.execute(
        VerifyRequest(
            URL, gpg_key=key_fingerprint_hex, key_server_info=KEY_SERVERS
        ),
        output,
        session=FakeSession(make_key_response(armored_key)),
    )

    assert report.key is not None
    assert not report.verified
    assert output.getvalue() == b""


@pytest.mark.asyncio
async def test_key_not_found_fails_closed(
    workflow: VerifyWorkflow, key_fingerprint_hex: str
):
    """Test a key lookup failure raises and releases nothing."""
    output = io.BytesIO()

    with pytest.raises(KeyNotFoundError):
        await workflow.execute(
            VerifyRequest(
                URL,
                ExpectedDigestSet(sha256=SHA256),
                gpg_key=key_fingerprint_hex,
                key_server_info=KEY_SERVERS,
            ),
            output,
            session=FakeSession(make_key_response(status=404)),
        )

    assert output.getvalue() == b""


@pytest.mark.asyncio
async def test_key_collision_fails_closed(
    workflow: VerifyWorkflow,
    armored_key: str,
    other_pgp_key: pgpy.PGPKey,
):
    """Test several keys for one identifier raise."""
    session = FakeSession(
        make_key_response(f"{armored_key}\n{other_pgp_key.pubkey}")
    )

    with pytest.raises(MultipleKeysReturnedError):
        await workflow.execute(
            VerifyRequest(
                URL,
                ExpectedDigestSet(sha256=SHA256),
                gpg_key="DEADBEEF",
                min_key_length=KeyLength.KEY_ID_32_BIT,
                key_server_info=KEY_SERVERS,
            ),
            io.BytesIO(),
            session=session,
        )


@pytest.mark.asyncio
async def test_malformed_checksum_fails_before_download(
    workflow: VerifyWorkflow,
):
    """Test checksum shape errors happen before any request."""
    session = FakeSession()

    with pytest.raises(InvalidHashLengthError):
        await workflow.execute(
            VerifyRequest(URL, ExpectedDigestSet(sha256="abc")),
            io.BytesIO(),
            session=session,
        )

    session.get.assert_not_called()


@pytest.mark.asyncio
async def test_insecure_key_fails_before_download(workflow: VerifyWorkflow):
    """Test short key IDs are rejected before any request."""
    session = FakeSession()

    with pytest.raises(GpgKeyInsecureError):
        await workflow.execute(
            VerifyRequest(
                URL, ExpectedDigestSet(sha256=SHA256), gpg_key="DEADBEEF"
            ),
            io.BytesIO(),
            session=session,
        )

    session.get.assert_not_called()


@pytest.mark.asyncio
async def test_path_destination_only_created_when_verified(
    workflow: VerifyWorkflow, tmp_path: Path
):
    """Test a file destination is not touched by a failed run."""
    good = tmp_path / "good.tar.gz"
    bad = tmp_path / "bad.tar.gz"

    await workflow.execute(
        VerifyRequest(URL, ExpectedDigestSet(sha256=SHA256)),
        good,
        session=FakeSession(),
    )
    await workflow.execute(
        VerifyRequest(URL, ExpectedDigestSet(sha256="0" * 64)),
        bad,
        session=FakeSession(),
    )

    assert good.read_bytes() == CONTENT
    assert not bad.exists()


@pytest.mark.asyncio
async def test_output_failure(workflow: VerifyWorkflow, tmp_path: Path):
    """Test a destination that cannot be written raises OutputError."""
    destination = tmp_path / "missing-dir" / "out.tar.gz"

    with pytest.raises(OutputError) as exc_info:
        await workflow.execute(
            VerifyRequest(URL, ExpectedDigestSet(sha256=SHA256)),
            destination,
            session=FakeSession(),
        )

    assert exc_info.value.destination == str(destination)
    assert str(exc_info.value).startswith("Failed to write out file")


@pytest.mark.asyncio
async def test_temporary_directory_removed(
    workflow: VerifyWorkflow, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    """Test the downloaded copy does not outlive the run."""
    monkeypatch.setenv("TMPDIR", str(tmp_path))
    monkeypatch.setattr("tempfile.tempdir", None)

    await workflow.execute(
        VerifyRequest(URL, ExpectedDigestSet(sha256=SHA256)),
        io.BytesIO(),
        session=FakeSession(),
    )

    assert list(tmp_path.glob("dlverify*")) == []


@pytest.mark.asyncio
async def test_report_json(
    workflow: VerifyWorkflow, armored_key: str, key_fingerprint_hex: str
):
    """Test the report serializes the checks that ran."""
    report = await workflow.execute(
        VerifyRequest(
            URL,
            ExpectedDigestSet(sha256=SHA256),
            gpg_key=key_fingerprint_hex,
            key_server_info=KEY_SERVERS,
        ),
        io.BytesIO(),
        session=FakeSession(make_key_response(armored_key)),
    )

    data = orjson.loads(report.to_json())

    assert data["url"] == URL
    assert data["verified"] is True
    assert data["emitted"] is True
    assert data["bytes_written"] == len(CONTENT)
    assert data["checksums"]["valid"] == ["SHA256"]
    assert data["gpg_key"]["requested"] == key_fingerprint_hex
    assert data["gpg_key"]["fingerprint"] == key_fingerprint_hex
    assert data["gpg_key"]["user_ids"] == [
        "Release Signer <release@example.org>"
    ]


@pytest.mark.asyncio
async def test_report_without_key(workflow: VerifyWorkflow):
    """Test the key entry is null when no key was requested."""
    report = await workflow.execute(
        VerifyRequest(URL, ExpectedDigestSet(md5=MD5)),
        io.BytesIO(),
        session=FakeSession(),
    )

    assert report.to_dict()["gpg_key"] is None
