#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
BF2 Migrator - OpenSpy account API client

Creates OpenSpy accounts and profiles for players moving away from GameSpy
based backends.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from ..exceptions import APIError, AuthenticationError, RequestError, UnexpectedResponseError

logger = logging.getLogger(__name__)

BASE_URL = "http://account.openspy.net/api/"


@dataclass
class ProfileDTO:
    id: int
    nick: str
    uniquenick: str
    namespaceid: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProfileDTO":
        return cls(
            id=int(data.get("id", 0)),
            nick=str(data.get("nick", "")),
            uniquenick=str(data.get("uniquenick", "")),
            namespaceid=int(data.get("namespaceid", 0)),
        )


class OpenSpyClient:
    """Client for the OpenSpy account REST API."""

    def __init__(self, base_url: str = BASE_URL, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.auth_token: Optional[str] = None

    def create_account(self, email: str, password: str, partner_code: int = 0) -> None:
        """Register an account and keep its auth token for later calls."""
        body = self._do("PUT", "auth/register", expect=dict, json={
            "email": email,
            "password": password,
            "partnercode": partner_code,
        })
        self.auth_token = body.get("auth_token")
        logger.info("Created OpenSpy account for %s", email)

    def create_profile(self, nick: str, namespace_id: int) -> ProfileDTO:
        body = self._do("PUT", "profile", authenticated=True, expect=dict, json={
            "profile": {
                "nick": nick,
                "uniquenick": nick,
                "namespaceid": str(namespace_id),
            },
        })
        profile = body.get("profile") or {}
        if not isinstance(profile, dict):
            raise UnexpectedResponseError(self.base_url + "profile", "a profile object")
        logger.info("Created OpenSpy profile %s", nick)
        return ProfileDTO.from_dict(profile)

    def get_profiles(self) -> List[ProfileDTO]:
        body = self._do("GET", "profile", authenticated=True, expect=list)
        if not all(isinstance(item, dict) for item in body):
            raise UnexpectedResponseError(self.base_url + "profile", "a list of profile objects")
        return [ProfileDTO.from_dict(item) for item in body]

    def _do(self, method: str, path: str, authenticated: bool = False,
            expect: Optional[type] = None, **kwargs) -> Any:
        url = self.base_url + path
        headers = {}
        if authenticated:
            if not self.auth_token:
                raise AuthenticationError()
            headers["Authorization"] = f"Bearer {self.auth_token}"

        response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        if response.status_code != 200:
            raise RequestError(url, response.status_code)

        try:
            body = response.json()
        except ValueError:
            raise UnexpectedResponseError(url, "a JSON body")

        # Only objects can carry an error
        if isinstance(body, dict) and body.get("error"):
            error = body["error"]
            if not isinstance(error, dict):
                error = {"message": error}
            raise APIError(str(error.get("code", "")), str(error.get("message", "")))

        if expect is not None and not isinstance(body, expect):
            raise UnexpectedResponseError(url, f"a JSON {'object' if expect is dict else 'array'}")

        return body
