"""Strongly typed identifiers for coachlink domain entities.

A coach has two identities: the account that signs in (``CoachAccountId``)
and the coach profile that relationships point at (``CoachProfileId``).
They are separate NewTypes so a type checker rejects passing one where the
other is expected.
"""

from typing import NewType
from uuid import UUID

AccountId = NewType("AccountId", UUID)
CoachAccountId = NewType("CoachAccountId", UUID)
CoachProfileId = NewType("CoachProfileId", UUID)
AthleteProfileId = NewType("AthleteProfileId", UUID)
InvitationId = NewType("InvitationId", UUID)
RelationshipId = NewType("RelationshipId", UUID)
