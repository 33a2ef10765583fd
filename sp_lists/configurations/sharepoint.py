import os
from typing import Dict, Optional

import requests
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr


class SharepointConfiguration(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "metadata": {
                "label": "SharePoint Lists",
                "section": "credentials",
                "type": "sharepoint",
                "categories": ["office"],
            }
        }
    )
    site_url: str = Field(description="SharePoint Site URL")
    token: Optional[SecretStr] = Field(default=None, description="Bearer token sent with every request")
    api_extra_headers: Dict[str, str] = Field(default_factory=dict, description="Headers added to every request")
    verify_ssl: bool = Field(default=True, description="Verify the server TLS certificate")
    timeout: int = Field(default=30, description="Request timeout in seconds")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "SharepointConfiguration":
        """Builds the configuration from SHAREPOINT_* environment variables.

        Values from ``env_file`` (default ``.env`` in the working directory)
        take precedence over the process environment.
        """
        env_file = env_file or '.env'
        if os.path.exists(env_file):
            load_dotenv(env_file, override=True)
        values = {
            "site_url": os.getenv('SHAREPOINT_SITE_URL', ''),
            "token": os.getenv('SHAREPOINT_TOKEN') or None,
        }
        verify_ssl = os.getenv('SHAREPOINT_VERIFY_SSL')
        if verify_ssl is not None:
            values["verify_ssl"] = verify_ssl.strip().lower() not in ('0', 'false', 'no')
        timeout = os.getenv('SHAREPOINT_TIMEOUT')
        if timeout:
            values["timeout"] = int(timeout)
        return cls(**values)

    @staticmethod
    def check_connection(settings: dict) -> str | None:
        """
        Test the connection to the SharePoint REST api of a site.

        Args:
            settings: Dictionary containing 'site_url' (required) and 'token' (optional)

        Returns:
            None if connection is successful, error message string otherwise
        """
        site_url = settings.get("site_url")
        if site_url is None or site_url == "":
            if site_url == "":
                return "Site URL cannot be empty"
            return "Site URL is required"

        if not isinstance(site_url, str):
            return "Site URL must be a string"

        site_url = site_url.strip()
        if not site_url:
            return "Site URL cannot be empty"

        if not site_url.startswith(("http://", "https://")):
            return "Site URL must start with http:// or https://"

        site_url = site_url.rstrip("/")

        headers = {"Accept": "application/json;odata=verbose"}
        token = settings.get("token")
        if hasattr(token, "get_secret_value"):
            token = token.get_secret_value()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            api_response = requests.get(
                f"{site_url}/_api/web",
                headers=headers,
                verify=settings.get("verify_ssl", True),
                timeout=10,
            )

            if api_response.status_code == 200:
                return None
            elif api_response.status_code == 401:
                return "Access token is invalid or expired"
            elif api_response.status_code == 403:
                return "Access forbidden - token may lack required permissions for this site"
            elif api_response.status_code == 404:
                return f"Site not found or not accessible: {site_url}"
            else:
                return f"SharePoint API request failed with status {api_response.status_code}"

        except requests.exceptions.Timeout:
            return "Connection timeout - SharePoint is not responding"
        except requests.exceptions.ConnectionError:
            return "Connection error - unable to reach SharePoint"
        except requests.exceptions.RequestException as e:
            return f"Request failed: {str(e)}"
