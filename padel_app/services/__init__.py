"""
External Services

Modules:
- firebase: REST client for Firebase Authentication and Cloud Firestore
"""
