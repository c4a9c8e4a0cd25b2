import pytest
from fastapi import Depends, FastAPI, HTTPException
from fastapi.testclient import TestClient

from app.security import API_KEY_NAME, get_api_key, get_settings
from app.settings import Settings


def test_get_api_key_accepts_valid_key():
    result = get_api_key(
        api_key_header="secret", current_settings=Settings(BLOG_API_KEY="secret")
    )
    assert result == "secret"


def test_get_api_key_rejects_invalid_key():
    with pytest.raises(HTTPException) as exc_info:
        get_api_key(
            api_key_header="wrong", current_settings=Settings(BLOG_API_KEY="secret")
        )
    assert exc_info.value.status_code == 403


def test_get_api_key_rejects_missing_header():
    with pytest.raises(HTTPException):
        get_api_key(api_key_header=None, current_settings=Settings(BLOG_API_KEY="secret"))


def test_get_api_key_rejects_everything_when_unset():
    with pytest.raises(HTTPException):
        get_api_key(api_key_header="", current_settings=Settings(BLOG_API_KEY=""))


def make_secure_app(settings: Settings) -> FastAPI:
    app = FastAPI()
    app.dependency_overrides[get_settings] = lambda: settings

    @app.get("/secure")
    def secure(key=Depends(get_api_key)):
        return {"ok": True}

    return app


def test_dependency_in_route_accepts_valid_key():
    client = TestClient(make_secure_app(Settings(BLOG_API_KEY="secret")))

    res = client.get("/secure", headers={API_KEY_NAME: "secret"})

    assert res.status_code == 200
    assert res.json() == {"ok": True}


def test_dependency_in_route_rejects_invalid_key():
    client = TestClient(make_secure_app(Settings(BLOG_API_KEY="secret")))

    res = client.get("/secure", headers={API_KEY_NAME: "wrong"})

    assert res.status_code == 403
