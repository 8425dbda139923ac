"""
CMS content: static pages, site settings, testimonials, team members and receipt layout
"""
from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text

from app.core.database import Base
from app.models.common import Money, utcnow

SITE_SETTINGS_ID = "main"
BILL_SETTINGS_ID = "main"


class Page(Base):
    __tablename__ = "pages"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    is_published = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class SiteSettings(Base):
    """
    Singleton row (id "main") holding storefront configuration
    """
    __tablename__ = "site_settings"

    id = Column(String(20), primary_key=True, default=SITE_SETTINGS_ID)

    # Branding
    site_name = Column(String(255), nullable=False, default="Doctor Planet")
    site_tagline = Column(String(255), default="Professional Medical Boutique")
    hero_title = Column(String(255))
    hero_subtitle = Column(String(500))
    primary_color = Column(String(20))
    secondary_color = Column(String(20))
    accent_color = Column(String(20))

    # Contact
    contact_email = Column(String(255), default="info@doctorplanet.com")
    contact_phone = Column(String(50), default="+92 300 1234567")
    contact_address = Column(String(500), default="Medical Plaza, Healthcare City")
    facebook_url = Column(String(500))
    instagram_url = Column(String(500))
    whatsapp_number = Column(String(50))

    # Shipping
    free_shipping_minimum = Column(Money, nullable=False, default=5000)
    shipping_fee = Column(Money, nullable=False, default=500)

    # Announcement and footer
    announcement_bar = Column(String(500))
    announcement_active = Column(Boolean, nullable=False, default=False)
    footer_text = Column(
        Text, default="Your trusted partner for premium medical apparel and equipment."
    )

    # Ids of the built-in hero slides the admin has hidden
    hidden_default_hero_banner_ids = Column(JSON, nullable=False, default=list)

    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Testimonial(Base):
    __tablename__ = "testimonials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(255))
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False, default=5)
    image = Column(String(500))
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utcnow, nullable=False)


class BillSettings(Base):
    """
    Singleton row (id "main") with what printed POS receipts show
    """
    __tablename__ = "bill_settings"

    id = Column(String(20), primary_key=True, default=BILL_SETTINGS_ID)

    store_name = Column(String(255), nullable=False, default="Doctor Planet")
    store_address = Column(String(500), default="Medical Plaza, Healthcare City")
    store_phone = Column(String(50), default="+92 300 1234567")
    store_email = Column(String(255), default="info@doctorplanet.com")
    header_text = Column(String(500), default="")
    logo_url = Column(String(500), default="/logos/logo.png")
    footer_text = Column(String(500), default="Thank you for shopping with us!")
    return_policy = Column(Text, default="Returns accepted within 7 days with receipt")

    show_logo = Column(Boolean, nullable=False, default=True)
    show_store_address = Column(Boolean, nullable=False, default=True)
    show_store_phone = Column(Boolean, nullable=False, default=True)
    show_return_policy = Column(Boolean, nullable=False, default=True)
    show_barcode = Column(Boolean, nullable=False, default=False)

    # 58mm, 80mm or A4; small, normal or large
    paper_width = Column(String(10), nullable=False, default="80mm")
    font_size = Column(String(10), nullable=False, default="normal")

    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(255), nullable=False)
    bio = Column(Text)
    image = Column(String(500))
    is_founder = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    email = Column(String(255))
    phone = Column(String(50))
    linkedin = Column(String(500))
    instagram = Column(String(500))
    facebook = Column(String(500))

    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utcnow, nullable=False)
