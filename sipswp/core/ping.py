"""Health-check message for the projection API."""


def get_ping_message() -> str:
    return "pong"
