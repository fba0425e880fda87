"""Domain error taxonomy shared by services and the HTTP layer."""


class SportClubError(Exception):
    status_code = 400
    default_message = 'Request failed'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(SportClubError):
    status_code = 400
    default_message = 'Invalid request'


class PermissionDenied(SportClubError):
    status_code = 403
    default_message = 'Permission denied'


class AuthenticationRequired(PermissionDenied):
    status_code = 401
    default_message = 'Authentication required'


class NotFoundError(SportClubError):
    status_code = 404
    default_message = 'Not found'


class ConflictError(SportClubError):
    status_code = 409
    default_message = 'Conflict'


class InvalidTransition(SportClubError):
    status_code = 409

    def __init__(self, current_status, new_status):
        super().__init__(f'Cannot change booking from {current_status} to {new_status}')
        self.current_status = current_status
        self.new_status = new_status


class CollaboratorUnavailable(SportClubError):
    status_code = 503
    default_message = 'Storage is temporarily unavailable'
