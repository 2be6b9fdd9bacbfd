"""Role permission helper sets."""

from app.db.enums.auth import UserRole

# Roles that can post and manage projects
ROLES_CAN_MANAGE_PROJECTS = {UserRole.MANAGER}

# Roles that can submit offers
ROLES_CAN_SUBMIT_OFFERS = {UserRole.FREELANCER}

# Roles that can issue signup links (superadmins may issue any role)
ROLES_CAN_INVITE = {UserRole.MANAGER}

# Roles a non-superadmin inviter may grant
INVITABLE_ROLES_BY_MANAGER = {UserRole.FREELANCER}

# Roles that can browse the user directory
ROLES_CAN_VIEW_DIRECTORY = {UserRole.MANAGER}
