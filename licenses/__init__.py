"""
Licenses module - Plugin license registry.

This module handles:
- PluginLicense entity and domain logic
- License keys, history and CMS license links
- Claims, owner-aware projection and deletes
- Reminder and expiry sweeps
"""
