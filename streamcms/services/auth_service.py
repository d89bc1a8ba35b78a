from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from streamcms.models.user import Role, RoleEnum, User
from streamcms.auth import verify_password, hash_password
from streamcms.exceptions import DuplicateResourceError, InvalidCredentialsError
import logging

logger = logging.getLogger(__name__)

DEFAULT_ROLES = {
    RoleEnum.user.value: [],
    RoleEnum.admin.value: ["*"],
    RoleEnum.superadmin.value: ["*"],
}


async def authenticate_user(email: str, password: str, db: AsyncSession) -> User:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalars().first()
    if user and verify_password(password, user.hashed_password):
        return user
    logger.info(f"Failed login attempt for {email}")
    raise InvalidCredentialsError()


async def ensure_default_roles(db: AsyncSession) -> dict[str, Role]:
    result = await db.execute(select(Role))
    roles = {role.name: role for role in result.scalars().all()}
    for name, permissions in DEFAULT_ROLES.items():
        if name not in roles:
            roles[name] = Role(name=name, permissions=permissions)
            db.add(roles[name])
    await db.commit()
    return roles


async def register_user(
    email: str,
    password: str,
    db: AsyncSession,
    name: str | None = None,
    role: str = RoleEnum.user.value,
) -> User:
    result = await db.execute(select(User).where(User.email == email))
    if result.scalars().first():
        raise DuplicateResourceError("User", "email", email)

    roles = await ensure_default_roles(db)
    new_user = User(
        email=email,
        name=name,
        hashed_password=hash_password(password),
        role_id=roles[role].id,
    )
    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)
    logger.info(f"User registered: id={new_user.id}, role={role}")
    return new_user
