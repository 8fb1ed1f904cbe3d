"""
Shared fixtures for the Typopp test suite.
"""

import os

# Loggers read the global config on import; keep test output quiet and
# predictable before any project module is imported.
os.environ['TYPOPP_LOG_FORMAT'] = 'text'
os.environ['TYPOPP_LOG_LEVEL'] = 'WARNING'
os.environ['TYPOPP_RATE_LIMIT'] = 'false'
os.environ.pop('TYPOPP_ENV', None)
os.environ.pop('TYPOPP_PATTERNS_FILE', None)
os.environ.pop('TYPOPP_GOOGLE_ACCESS_TOKEN', None)

import pytest

from config_logging import AppConfig, reset_config

reset_config()


class FakeDriveClient:
    """Records calls and returns canned Drive data."""

    def __init__(self, token, timeout):
        self.token = token
        self.timeout = timeout
        self.calls = []

    def list_folders(self):
        self.calls.append(('list_folders',))
        return [{'id': 'f1', 'name': 'Essays', 'parents': ['root']}]

    def list_documents(self, folder_id):
        self.calls.append(('list_documents', folder_id))
        return [{'id': 'd1', 'name': 'Draft', 'createdTime': '2024-01-01T00:00:00Z',
                 'modifiedTime': '2024-01-02T00:00:00Z'}]

    def get_document(self, document_id):
        self.calls.append(('get_document', document_id))
        return {'id': document_id, 'title': 'Draft', 'content': 'I recieve mail', 'lastModified': 'rev1'}


@pytest.fixture
def analyzer():
    """Analyzer with the default pattern tables."""
    from proofing import DocumentAnalyzer
    return DocumentAnalyzer()


@pytest.fixture
def app_config():
    return AppConfig(rate_limit_enabled=False, google_access_token='', log_format='text')


@pytest.fixture
def drive_clients():
    """Every FakeDriveClient the app creates, in order."""
    return []


@pytest.fixture
def app(app_config, analyzer, drive_clients):
    from app import create_app

    def factory(token, timeout):
        client = FakeDriveClient(token, timeout)
        drive_clients.append(client)
        return client

    flask_app = create_app(app_config, analyzer=analyzer, drive_client_factory=factory)
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
