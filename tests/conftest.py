"""Shared test fixtures for md2hatena."""

import pytest
from unittest.mock import MagicMock

from md2hatena.config.models import Md2HatenaConfig
from md2hatena.converter.events import DocumentEventSource
from md2hatena.converter.models import ResolvedImage
from md2hatena.resolver import Fetcher, Uploader

# Enough of a PNG for content sniffing
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24

SAMPLE_NOTE = """\
# Release notes

Intro paragraph with a screenshot:

![dashboard](https://hackmd.io/_uploads/dash.png)

## Details

![](https://example.com/img/chart.png "Weekly chart")

```python
print("hello")
```

Again: ![dashboard again](https://hackmd.io/_uploads/dash.png)
"""


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path, monkeypatch):
    """Keep real config files in cwd and $HOME out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_config():
    return Md2HatenaConfig()


@pytest.fixture
def source():
    return DocumentEventSource()


@pytest.fixture
def sample_note():
    return SAMPLE_NOTE


@pytest.fixture
def resolved_dash():
    return ResolvedImage(
        original_url="https://hackmd.io/_uploads/dash.png",
        destination_url="https://cdn-ak.f.st-hatena.com/images/fotolife/s/sample/20240101/20240101000001.png",
    )


@pytest.fixture
def mock_fetcher():
    fetcher = MagicMock(spec=Fetcher)
    fetcher.fetch.return_value = PNG_BYTES
    return fetcher


@pytest.fixture
def mock_uploader():
    uploader = MagicMock(spec=Uploader)
    counter = iter(range(1, 1000))
    uploader.upload.side_effect = lambda path, title: f"20240101{next(counter):06d}"
    uploader.compute_public_url.side_effect = (
        lambda identifier, extension: f"https://cdn.example/{identifier}.{extension}"
    )
    return uploader


@pytest.fixture
def cache_path(tmp_path):
    return tmp_path / "image-cache.txt"
