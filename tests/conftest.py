import pytest
from django.apps import apps


@pytest.fixture
def install_pipeline(monkeypatch):
    """Swap the process-wide pipeline used by the contact view."""
    def install(pipeline):
        monkeypatch.setattr(apps.get_app_config("contacts"), "pipeline", pipeline)
        return pipeline
    return install
