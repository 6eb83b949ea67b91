"""Infrastructure: Firestore REST transport and wire format."""
