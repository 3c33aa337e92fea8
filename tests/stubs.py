"""Deterministic stand-ins for the external collaborators."""

from types import SimpleNamespace

from medgames.models.types import SearchCandidateRecord


def record(title, set_id=None, labeler=None, generic_name=None):
    return SearchCandidateRecord(
        set_id=set_id or title.lower().replace(" ", "-"),
        title=title,
        generic_name=generic_name,
        labeler=labeler,
    )


class StubSearchClient:
    """Answers every query through a function and records what was asked."""

    def __init__(self, answer):
        self.answer = answer
        self.queries = []

    def search_medications(self, query):
        self.queries.append(query)
        return list(self.answer(query))


class FakeMistral:
    """Mimics Mistral().chat.complete and replays canned responses."""

    def __init__(self, *contents, error=None):
        self.contents = list(contents)
        self.error = error
        self.calls = []
        self.chat = SimpleNamespace(complete=self._complete)

    def _complete(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        content = self.contents.pop(0) if len(self.contents) > 1 else self.contents[0]
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])
