# canteen/domain/errors.py


class CanteenError(Exception):
    """Bazowy blad domenowy, renderowany jako {"success": false, "message": ...}."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CanteenError):
    status_code = 400


class ConflictError(CanteenError):
    status_code = 400


class EmptyCartError(CanteenError):
    status_code = 400

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class OutOfStockError(CanteenError):
    status_code = 400

    def __init__(self, product_name: str):
        super().__init__(f"Out of stock: {product_name}")
        self.product_name = product_name


class AuthError(CanteenError):
    status_code = 401


class UnauthenticatedError(AuthError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(CanteenError):
    status_code = 403


class NotFoundError(CanteenError):
    status_code = 404


class UserNotFoundError(NotFoundError):
    # login zwraca 400 zamiast 404, frontend tak to obsluguje
    status_code = 400


class InvalidPasswordError(AuthError):
    status_code = 400


class PaymentGatewayError(CanteenError):
    status_code = 502
