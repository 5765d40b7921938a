import logging

import pytest

from ctrxml2json import config


@pytest.fixture(autouse=True)
def logs_folder(tmp_path, monkeypatch):
    """Keep log files out of the working directory and drop handlers afterwards."""
    folder = tmp_path / "logs"
    monkeypatch.setattr(config, "LOGS_FOLDER", str(folder))
    yield folder
    for name in ("app", "error", "debug"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_ctrxml2json", False):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def trial_dir(tmp_path):
    folder = tmp_path / "trials"
    folder.mkdir()
    return folder


@pytest.fixture
def write_xml(trial_dir):
    def _write(name, content):
        path = trial_dir / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
