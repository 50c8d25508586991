import re
import json


def parse_sse_events(body):
    """Split an SSE body into (event_type, data) pairs, in order."""
    pattern = re.compile(r'event: (\w+)\ndata: (.*?)\n\n', re.DOTALL)
    return [(m.group(1), json.loads(m.group(2))) for m in pattern.finditer(body)]


def assert_sse_event(body, event_type, **expected_data):
    """
    Assert that an SSE event with the given type and expected data exists in the body.
    Checks all occurrences of the event type.
    """
    for ev_type, data in parse_sse_events(body):
        if ev_type != event_type:
            continue
        if all(key in data and data[key] == value for key, value in expected_data.items()):
            return

    assert False, f"No '{event_type}' event found with all expected data: {expected_data} in SSE body:\n{body}"


def progress_contents(body):
    """Contents of every progress event, in order."""
    return [data["content"] for ev_type, data in parse_sse_events(body) if ev_type == "progress"]


class ProgressRecorder:
    """Progress callback that records every value it receives."""

    def __init__(self):
        self.values = []

    def __call__(self, value):
        self.values.append(value)
