# Fixed dataset used by the /api/seed endpoint and the seed scripts.
# Toasts reference the users by userID, so users must be inserted first.

SAMPLE_USERS = [
    {"userID": "550e8400-e29b-41d4-a716-446655440001", "name": "Alice Johnson"},
    {"userID": "550e8400-e29b-41d4-a716-446655440002", "name": "Bob Smith"},
    {"userID": "550e8400-e29b-41d4-a716-446655440003", "name": "Charlie Brown"},
    {"userID": "550e8400-e29b-41d4-a716-446655440004", "name": "Diana Prince"},
]

SAMPLE_TOASTS = [
    {
        "toastID": "650e8400-e29b-41d4-a716-446655440001",
        "toasterID": "550e8400-e29b-41d4-a716-446655440001",  # Alice
        "toastieID": "550e8400-e29b-41d4-a716-446655440002",  # Bob
    },
    {
        "toastID": "650e8400-e29b-41d4-a716-446655440002",
        "toasterID": "550e8400-e29b-41d4-a716-446655440002",  # Bob
        "toastieID": "550e8400-e29b-41d4-a716-446655440003",  # Charlie
    },
    {
        "toastID": "650e8400-e29b-41d4-a716-446655440003",
        "toasterID": "550e8400-e29b-41d4-a716-446655440003",  # Charlie
        "toastieID": "550e8400-e29b-41d4-a716-446655440001",  # Alice
    },
    {
        "toastID": "650e8400-e29b-41d4-a716-446655440004",
        "toasterID": "550e8400-e29b-41d4-a716-446655440004",  # Diana
        "toastieID": "550e8400-e29b-41d4-a716-446655440001",  # Alice
    },
]
