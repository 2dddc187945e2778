import pytest

from instacomment.config import Settings


class StubFetcher:
    collapse_whitespace = False

    def __init__(self, caption="user123: Great day!", error=None):
        self.caption = caption
        self.error = error
        self.calls = []

    def fetch(self, shortcode):
        self.calls.append(shortcode)
        if self.error:
            raise self.error
        return self.caption


class StubGenerator:
    def __init__(self, response='["좋아요", "멋져요", "최고예요"]', error=None):
        self.response = response
        self.error = error
        self.calls = []

    def complete(self, system, prompt, temperature):
        self.calls.append({"system": system, "prompt": prompt, "temperature": temperature})
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def settings(tmp_path):
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>comments</h1>", encoding="utf-8")
    return Settings(_env_file=None, openai_api_key="test", static_dir=str(static_dir))


@pytest.fixture
def fetcher():
    return StubFetcher()


@pytest.fixture
def llm():
    return StubGenerator()


class FakeBrowserSession:
    def __init__(self, html, error=None):
        self.html = html
        self.error = error
        self.visited = []
        self.closed = 0

    def goto(self, url, timeout_ms):
        self.visited.append((url, timeout_ms))
        if self.error:
            raise self.error

    def content(self):
        return self.html

    def close(self):
        self.closed += 1
