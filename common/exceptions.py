"""
5dpapa Backend - Custom Exceptions
===================================
Business-level exceptions, each carrying the HTTP status and the
problem-document title/type it is rendered as (see common.problems).
"""

from typing import Dict, Optional


class ShopError(Exception):
    """Base exception for all business logic errors."""

    status_code = 500
    title = "Internal Server Error"
    slug = "internal-error"
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Internal(ShopError):
    pass


# ==========================================
# 400
# ==========================================

class ValidationFailed(ShopError):
    """Raised when a request body/query/path fails binding or constraints."""
    status_code = 400
    title = "Validation Failed"
    slug = "validation-failed"
    default_message = "Invalid input data"

    def __init__(self, errors: Optional[Dict[str, str]] = None, message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors or {}


# ==========================================
# 401
# ==========================================

class InvalidCredentials(ShopError):
    """Raised on login failure or for a disabled account."""
    status_code = 401
    title = "Invalid Credentials"
    slug = "invalid-credentials"
    default_message = "Invalid username or password"


class Unauthenticated(ShopError):
    status_code = 401
    title = "Unauthorized"
    slug = "unauthenticated"
    default_message = "Full authentication is required to access this resource"


class TokenInvalid(ShopError):
    """Bad signature, malformed or expired token."""
    status_code = 401
    title = "Invalid Token"
    slug = "invalid-token"
    default_message = "Token is invalid or expired"


# ==========================================
# 403
# ==========================================

class Forbidden(ShopError):
    """Raised when the role is insufficient or a resource belongs to someone else."""
    status_code = 403
    title = "Access Denied"
    slug = "access-denied"
    default_message = "Access denied"


class CsrfInvalid(ShopError):
    status_code = 403
    title = "Invalid CSRF Token"
    slug = "csrf-invalid"
    default_message = "CSRF token missing or invalid"


# ==========================================
# 404
# ==========================================

class NotFound(ShopError):
    """Raised when a requested resource doesn't exist."""
    status_code = 404
    title = "Not Found"
    slug = "not-found"
    default_message = "Resource not found"


class UserNotFound(NotFound):
    title = "User Not Found"
    slug = "user-not-found"

    def __init__(self, user_id):
        super().__init__(f"User not found with id: {user_id}")


class ProductNotFound(NotFound):
    title = "Product Not Found"
    slug = "product-not-found"

    def __init__(self, product_id):
        super().__init__(f"Product not found with id: {product_id}")


class CategoryNotFound(NotFound):
    title = "Category Not Found"
    slug = "category-not-found"

    def __init__(self, category_id):
        super().__init__(f"Category not found with id: {category_id}")


class CartItemNotFound(NotFound):
    title = "Cart Item Not Found"
    slug = "cart-item-not-found"

    def __init__(self, item_id):
        super().__init__(f"Cart item not found with id: {item_id}")


# ==========================================
# 405
# ==========================================

class MethodNotAllowed(ShopError):
    status_code = 405
    title = "Method Not Allowed"
    slug = "method-not-allowed"
    default_message = "Request method not supported"


# ==========================================
# 409 - uniqueness
# ==========================================

class Conflict(ShopError):
    status_code = 409
    title = "Conflict"
    slug = "conflict"


class DuplicateUsername(Conflict):
    title = "Duplicate Username"
    slug = "duplicate-username"

    def __init__(self, username: str):
        super().__init__(f"Username already exists: {username}")


class DuplicateEmail(Conflict):
    title = "Duplicate Email"
    slug = "duplicate-email"

    def __init__(self, email: str):
        super().__init__(f"Email already exists: {email}")


class DuplicateCategoryName(Conflict):
    title = "Duplicate Category Name"
    slug = "duplicate-category-name"

    def __init__(self, name: str):
        super().__init__(f"Category name already exists: {name}")


# ==========================================
# 409 - domain rules
# ==========================================

class ProductInactive(Conflict):
    title = "Product Inactive"
    slug = "product-inactive"

    def __init__(self, product_id):
        super().__init__(f"Product is not available: {product_id}")


class InsufficientStock(Conflict):
    """Raised when the requested quantity exceeds the product stock."""
    title = "Insufficient Stock"
    slug = "insufficient-stock"

    def __init__(self, stock: int, in_cart: Optional[int] = None):
        msg = f"Insufficient stock, available: {stock}"
        if in_cart is not None:
            msg += f", already in cart: {in_cart}"
        super().__init__(msg)
        self.stock = stock
        self.in_cart = in_cart


class CategoryInUse(Conflict):
    title = "Category In Use"
    slug = "category-in-use"


class CategoryDepthExceeded(Conflict):
    title = "Category Depth Exceeded"
    slug = "category-depth-exceeded"
    default_message = "Categories may not be nested more than two levels deep"


class CategoryCycle(Conflict):
    title = "Category Cycle"
    slug = "category-cycle"
    default_message = "A category cannot be its own parent"
