"""Signal names published on the SignalBus."""


class Signals:
    """Process-local signals. Notification categories use their own names."""

    # Bootstrap finished; payload: SessionState
    READY = "ready"

    # Non-fatal problem; payload: str
    WARNING = "warning"

    # Query or registration failure; payload: Failure
    FAILURE = "failure"

    # Every completed query round trip; payload: ActionRecord
    ACTION = "action"

    # Bot entered its target channel; payload: Channel
    JOIN = "join"

    # Another client moved into / out of the tracked channel; payload: Notification
    CLIENT_ENTER_CHANNEL = "cliententerchannel"
    CLIENT_LEFT_CHANNEL = "clientleftchannel"


# Raw notification category carrying client movements
CLIENT_MOVED = "clientmoved"

# Categories subscribed once the session is ready
NOTIFY_CATEGORIES = ("server", "textserver", "textchannel", "textprivate")
