# pawconnect/services/google_auth_service.py

import logging
import requests
from google_auth_oauthlib.flow import Flow


class GoogleAuthService:
    """Google OAuth 2.0 인증 코드 교환과 사용자 정보 조회를 담당하는 서비스 클래스입니다."""
    _user_info_url = "https://www.googleapis.com/oauth2/v3/userinfo"
    _scopes = [
        "https://www.googleapis.com/auth/userinfo.profile",
        "https://www.googleapis.com/auth/userinfo.email",
        "openid"
    ]

    @staticmethod
    def exchange_code_for_user_info(auth_code: str, client_secrets_path: str, redirect_uri: str = "postmessage") -> dict:
        """
        인증 코드를 Access Token으로 교환하고, 이를 사용해 사용자 정보를 가져옵니다.
        반환값은 Google userinfo 응답 그대로이며 'sub', 'email', 'name', 'picture' 키를 포함합니다.
        """
        flow = Flow.from_client_secrets_file(client_secrets_path, scopes=GoogleAuthService._scopes)
        flow.redirect_uri = redirect_uri

        try:
            flow.fetch_token(code=auth_code)
            response = requests.get(
                GoogleAuthService._user_info_url,
                headers={"Authorization": f"Bearer {flow.credentials.token}"}
            )
            response.raise_for_status()
        except Exception as e:
            logging.warning(f"Google OAuth code exchange failed: {e}")
            return None

        return response.json()
