"""Data models for the users blueprint."""

from __future__ import annotations

from typing import TypedDict

from viralviews.core.types import FirestoreDocument


class UserStats(TypedDict, total=False):
    """Battle and engagement counters for a user."""

    battlesWon: int
    battlesLost: int
    totalBattles: int
    totalViews: int
    totalLikes: int


class SocialLinks(TypedDict, total=False):
    instagram: str
    youtube: str
    soundcloud: str
    tiktok: str


class Preferences(TypedDict, total=False):
    emailNotifications: bool
    pushNotifications: bool
    privacy: str


class UserProfile(FirestoreDocument, total=False):
    """A user document in Firestore."""

    uid: str
    email: str
    username: str
    displayName: str
    photoURL: str
    bio: str
    location: str
    isActive: bool
    isAdmin: bool
    socialLinks: SocialLinks
    stats: UserStats
    preferences: Preferences
