# masterxp/errors.py
"""
Error taxonomy for MasterXP.

- InvalidArgument -> 400 (bad XP amount, missing task fields, bad dates)
- NotFound        -> 404 (task/account missing or owned by someone else)
- AuthError       -> 401 (missing or invalid bearer token)

Anything else is an infrastructure failure and propagates unchanged.
"""


class MasterXPError(Exception):
    status_code = 500
    code = "server_error"

    def __init__(self, message=None):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self):
        return {"ok": False, "error": self.message}


class InvalidArgument(MasterXPError, ValueError):
    status_code = 400
    code = "invalid_input"


class NotFound(MasterXPError, LookupError):
    status_code = 404
    code = "not_found"


class AuthError(MasterXPError):
    status_code = 401
    code = "unauthenticated"
