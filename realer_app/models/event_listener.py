import uuid

from slugify import slugify
from sqlalchemy import event

from .models import BlogPost, Profile, PropertyListing
from .utils import build_location, build_title


@event.listens_for(PropertyListing, "before_insert")
def add_slug(mapper, connection, target: PropertyListing):
    if not target.slug:
        base = f"{target.title}-{uuid.uuid4().hex[:6]}"
        target.slug = slugify(base)


@event.listens_for(PropertyListing, "before_insert")
@event.listens_for(PropertyListing, "before_update")
def derive_location_and_title(mapper, connection, target: PropertyListing):
    if target.city and target.state and target.zip_code:
        target.location = build_location(target.city, target.state, target.zip_code)
        if target.property_type:
            target.title = build_title(target.property_type, target.city, target.state)


@event.listens_for(Profile, "before_insert")
@event.listens_for(Profile, "before_update")
def normalize_profile(mapper, connection, target: Profile):
    target.normalize()


@event.listens_for(BlogPost, "before_insert")
def estimate_read_time(mapper, connection, target: BlogPost):
    if not target.read_time and target.content:
        minutes = max(1, round(len(target.content.split()) / 200))
        target.read_time = f"{minutes} min read"
