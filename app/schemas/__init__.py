from app.schemas.auth import Token, UserCreate, UserLogin, UserResponse
from app.schemas.user import ProfileUpdate, ChangePasswordRequest, CreditsResponse
from app.schemas.admin import AdminUserUpdate, RoleChangeRequest, CreditUpdateRequest
from app.schemas.location import DropoffLocationCreate, DropoffLocationUpdate, DropoffLocationResponse
