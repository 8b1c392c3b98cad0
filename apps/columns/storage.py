"""
Storage ports for ColumnConfigStore.

MemoryStorage keeps state in a dict (tests, scripts).
SessionStorage keeps it in the Django session of the current user, so every
browsing session owns its own layout.
"""

SESSION_PREFIX = 'column-config:'


class MemoryStorage:

    def __init__(self, initial=None):
        self.data = dict(initial or {})

    def read(self, key):
        return self.data.get(key)

    def write(self, key, text):
        self.data[key] = text


class SessionStorage:

    def __init__(self, session):
        self.session = session

    def read(self, key):
        return self.session.get(SESSION_PREFIX + key)

    def write(self, key, text):
        self.session[SESSION_PREFIX + key] = text
        self.session.modified = True
