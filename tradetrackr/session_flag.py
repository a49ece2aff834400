AUTH_SESSION_KEY = 'tt_auth_v1'


class SessionFlag:
    """Whether the PIN gate was passed in the current browser session.

    `session` is any mutable mapping. The app hands in Flask's session, which
    is left non-permanent (`session.permanent` is False), so its cookie has no
    expiry and ends with the browser session.
    """

    def __init__(self, session):
        self.session = session

    def is_active(self) -> bool:
        return self.session.get(AUTH_SESSION_KEY) == '1'

    def set_active(self, value: bool) -> None:
        if value:
            self.session[AUTH_SESSION_KEY] = '1'
        else:
            self.session.pop(AUTH_SESSION_KEY, None)
