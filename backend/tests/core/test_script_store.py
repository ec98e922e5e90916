"""Unit tests for core.script_store: local directory and S3 repositories."""

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from sqlproc.core.config import Settings
from sqlproc.core.errors import NotFound, ScriptStoreError
from sqlproc.core.script_store import (
    LocalScriptRepository,
    S3ScriptRepository,
    build_script_repository,
)
from sqlproc.schemas import ScriptReference

REF = ScriptReference(
    database_name="ADF_DEMO", schema_name="TRIPPIN", stored_procedure_name="LOAD_PEOPLE"
)


def _write_script(root: Path, text: str, *, bom: bool = False) -> None:
    path = root / "ADF_DEMO" / "TRIPPIN" / "LOAD_PEOPLE.sql"
    path.parent.mkdir(parents=True)
    data = text.encode("utf-8")
    path.write_bytes(b"\xef\xbb\xbf" + data if bom else data)


class TestLocalScriptRepository:
    def test_reads_script(self, tmp_path: Path) -> None:
        _write_script(tmp_path, "SELECT 1 AS A;")
        assert LocalScriptRepository(tmp_path).read(REF) == "SELECT 1 AS A;"

    def test_bom_stripped(self, tmp_path: Path) -> None:
        _write_script(tmp_path, "SELECT 1;", bom=True)
        assert LocalScriptRepository(tmp_path).read(REF) == "SELECT 1;"

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(NotFound) as exc_info:
            LocalScriptRepository(tmp_path).read(REF)
        assert exc_info.value.key == "ADF_DEMO/TRIPPIN/LOAD_PEOPLE.sql"

    def test_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "ADF_DEMO" / "TRIPPIN" / "LOAD_PEOPLE.sql"
        path.parent.mkdir(parents=True)
        path.write_bytes(b"\xff\xfe\x00")
        with pytest.raises(ScriptStoreError):
            LocalScriptRepository(tmp_path).read(REF)


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetObject")


class TestS3ScriptRepository:
    def test_reads_under_prefix(self) -> None:
        client = MagicMock()
        client.get_object.return_value = {"Body": io.BytesIO(b"SELECT 1;")}

        repo = S3ScriptRepository("scripts", prefix="/procs/", client=client)

        assert repo.read(REF) == "SELECT 1;"
        client.get_object.assert_called_once_with(
            Bucket="scripts", Key="procs/ADF_DEMO/TRIPPIN/LOAD_PEOPLE.sql"
        )

    def test_no_prefix(self) -> None:
        client = MagicMock()
        client.get_object.return_value = {"Body": io.BytesIO(b"SELECT 1;")}
        S3ScriptRepository("scripts", client=client).read(REF)
        assert client.get_object.call_args.kwargs["Key"] == "ADF_DEMO/TRIPPIN/LOAD_PEOPLE.sql"

    @pytest.mark.parametrize("code", ["NoSuchKey", "404"])
    def test_missing(self, code: str) -> None:
        client = MagicMock()
        client.get_object.side_effect = _client_error(code)
        with pytest.raises(NotFound):
            S3ScriptRepository("scripts", client=client).read(REF)

    def test_access_denied(self) -> None:
        client = MagicMock()
        client.get_object.side_effect = _client_error("AccessDenied")
        with pytest.raises(ScriptStoreError):
            S3ScriptRepository("scripts", client=client).read(REF)

    def test_transport_error(self) -> None:
        client = MagicMock()
        client.get_object.side_effect = EndpointConnectionError(endpoint_url="https://s3")
        with pytest.raises(ScriptStoreError):
            S3ScriptRepository("scripts", client=client).read(REF)


class TestBuildScriptRepository:
    def test_local(self, tmp_path: Path) -> None:
        repo = build_script_repository(Settings(SCRIPT_STORE_DIR=str(tmp_path)))
        assert isinstance(repo, LocalScriptRepository)

    def test_local_requires_dir(self) -> None:
        with pytest.raises(ScriptStoreError):
            build_script_repository(Settings(SCRIPT_STORE_BACKEND="local", SCRIPT_STORE_DIR=None))

    def test_s3_requires_bucket(self) -> None:
        with pytest.raises(ValueError):
            Settings(SCRIPT_STORE_BACKEND="s3")

    def test_s3(self) -> None:
        s = Settings(
            SCRIPT_STORE_BACKEND="s3", SCRIPT_STORE_S3_BUCKET="scripts", AWS_REGION="us-east-1"
        )
        assert isinstance(build_script_repository(s), S3ScriptRepository)
