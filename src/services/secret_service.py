"""Secret Manager access for trigger keys"""
import json
from typing import Dict, Optional
from google.cloud import secretmanager
from config.firebase_config import FirebaseConfig
import logging

logger = logging.getLogger(__name__)


class SecretService:
    """Loads and caches the shared keys callers present on trigger endpoints"""

    def __init__(self, project_id: Optional[str] = None, client=None):
        self.project_id = project_id or FirebaseConfig.PROJECT_ID
        self._client = client
        self._trigger_keys_cache = None

    def get_trigger_keys(self) -> Dict[str, str]:
        """
        Load trigger keys from Google Secret Manager

        The secret holds a JSON object such as
        {"scheduler": "...", "rtdb-events": "..."}.

        Returns:
            Dictionary mapping caller name to key (empty on failure)
        """
        if self._trigger_keys_cache:
            return self._trigger_keys_cache

        try:
            client = self._client or secretmanager.SecretManagerServiceClient()
            secret_name = f"projects/{self.project_id}/secrets/{FirebaseConfig.TRIGGER_KEYS_SECRET_NAME}/versions/latest"
            response = client.access_secret_version(request={"name": secret_name})
            self._trigger_keys_cache = json.loads(response.payload.data.decode('UTF-8'))
            return self._trigger_keys_cache
        except Exception as e:
            logger.error(f"Error loading trigger keys from Secret Manager: {e}")
            return {}
