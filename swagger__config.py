"""
Swagger/OpenAPI configuration for the Storefront Reservations API
"""

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/apispec.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api/docs",
}

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Storefront Reservations API",
        "description": "Product reservations for in-store pick-up: customer reservation form, staff order listings, dashboard and email notifications",
        "version": "1.0.0",
    },
    "host": "",
    "basePath": "/",
    "schemes": ["http", "https"],
    "tags": [
        {"name": "Reservations", "description": "Reservation form, listings and details"},
        {"name": "Utility", "description": "Health check"},
    ],
    "definitions": {
        "Error": {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "error"},
                "message": {"type": "string"},
            },
        },
        "ValidationError": {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "error"},
                "errors": {
                    "type": "object",
                    "additionalProperties": {"type": "array", "items": {"type": "string"}},
                    "example": {
                        "products": [
                            "At least one product must have a quantity greater than zero."
                        ]
                    },
                },
            },
        },
        "Product": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "name": {"type": "string"},
                "price": {"type": "number", "format": "float"},
                "img_path": {"type": "string"},
            },
        },
        "OrderDetail": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "order_id": {"type": "integer"},
                "product_id": {"type": "integer"},
                "quantity": {"type": "integer", "example": 2},
                "amount": {"type": "number", "format": "float", "example": 200.0},
                "product": {"$ref": "#/definitions/Product"},
            },
        },
        "Reservation": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "transaction_key": {"type": "string", "example": "Q7K2ZD"},
                "name": {"type": "string", "example": "Jane Doe"},
                "contact_number": {"type": "string", "example": "09171234567"},
                "email": {"type": "string", "format": "email"},
                "coupon": {"type": "string"},
                "pick_up_date": {"type": "string", "format": "date"},
                "order_id": {"type": "integer"},
                "created_at": {"type": "string", "format": "date-time"},
                "updated_at": {"type": "string", "format": "date-time"},
            },
        },
        "Order": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "transaction_key": {"type": "string", "example": "Q7K2ZD"},
                "status": {
                    "type": "string",
                    "enum": [
                        "pending",
                        "processing",
                        "ready to pickup",
                        "completed",
                        "cancelled",
                    ],
                },
                "total_amount": {"type": "number", "format": "float"},
                "created_at": {"type": "string", "format": "date-time"},
                "updated_at": {"type": "string", "format": "date-time"},
                "order_details": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/OrderDetail"},
                },
                "reservation": {"$ref": "#/definitions/Reservation"},
            },
        },
        "OrderPage": {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "pending"},
                "page": {"type": "integer", "example": 1},
                "per_page": {"type": "integer", "example": 10},
                "total": {"type": "integer"},
                "pages": {"type": "integer"},
                "orders": {"type": "array", "items": {"$ref": "#/definitions/Order"}},
            },
        },
        "Dashboard": {
            "type": "object",
            "properties": {
                "counts": {
                    "type": "object",
                    "example": {
                        "pending": 4,
                        "processing": 2,
                        "ready_to_pickup": 1,
                        "completed": 10,
                        "cancelled": 1,
                        "total": 18,
                    },
                },
                "recent_updates": {
                    "type": "object",
                    "example": {
                        "pending": 2,
                        "processing": 1,
                        "ready_to_pickup": 0,
                        "completed": 3,
                        "cancelled": 0,
                    },
                },
                "recent_window_hours": {"type": "integer", "example": 4},
                "window_start": {"type": "string", "format": "date-time"},
                "recent_orders": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/Order"},
                },
            },
        },
        "LineItemSummary": {
            "type": "object",
            "properties": {
                "product_name": {"type": "string"},
                "product_price": {"type": "string", "example": "100.00"},
                "quantity": {"type": "integer", "example": 2},
                "subtotal": {"type": "string", "example": "200.00"},
                "product_image": {"type": "string", "format": "uri"},
            },
        },
        "ReservationDetail": {
            "type": "object",
            "properties": {
                "reservation": {"$ref": "#/definitions/Reservation"},
                "order_details": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/LineItemSummary"},
                },
            },
        },
    },
}
