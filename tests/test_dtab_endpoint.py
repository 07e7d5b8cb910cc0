import logging

from fastapi.testclient import TestClient
import pytest

from admin import main
from admin.config import Settings
from admin.dtab import DtabParseError
from admin.services.dtab import DtabService


def test_dumps_base_dtab(client: TestClient) -> None:
    response = client.get('/admin/dtab')
    assert response.status_code == 200
    assert response.json() == {
        'dtab': [
            '/srv => /srv#/production',
            '/srv => /srv#/prod',
            '/s => /srv/local',
            '/$/inet => /$/nil',
            '/zk => /$/nil',
        ]
    }


def test_health(client: TestClient) -> None:
    assert client.get('/health').json() == {'status': 'ok'}


def test_invalid_base_dtab_fails_startup(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(main, 'settings', Settings(DTAB_BASE='/s=>'))
    with caplog.at_level(logging.ERROR, logger='admin.main'):
        with pytest.raises(DtabParseError):
            with TestClient(main.app):
                pass
    assert 'Invalid base dtab' in caplog.text


def test_base_dtab_loaded_on_startup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, 'settings', Settings(DTAB_BASE='/s=>/srv/local'))
    previous = DtabService.base()
    try:
        with TestClient(main.app) as client:
            assert client.get('/admin/dtab').json() == {'dtab': ['/s => /srv/local']}
    finally:
        DtabService._base = previous
