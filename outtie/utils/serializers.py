def _iso(value):
    return value.isoformat() if value else None


def public_user(u) -> dict:
    return {
        "id": u.id,
        "name": u.name,
        "instagram_handle": u.instagram_handle,
        "whatsapp": u.whatsapp,
        "phone": u.phone,
        "verification_status": u.verification_status,
        "created_at": _iso(u.created_at),
    }


def private_user(u) -> dict:
    data = public_user(u)
    data.update({
        "email": u.email,
        "graduation_year": u.graduation_year,
        "profile_photo": u.profile_photo,
    })
    return data


def lender_contact(u) -> dict | None:
    if u is None:
        return None
    return {
        "id": u.id,
        "name": u.name,
        "phone": u.phone,
        "instagram_handle": u.instagram_handle,
        "whatsapp": u.whatsapp,
    }


def item_to_dict(i, with_lender: bool = False) -> dict:
    data = {
        "id": i.id,
        "lender_id": i.lender_id,
        "title": i.title,
        "description": i.description,
        "category": i.category,
        "size": i.size,
        "rental_price_per_week": i.rental_price_per_week,
        "pickup_location": i.pickup_location,
        "must_return_washed": bool(i.must_return_washed),
        "payment_method": i.payment_method,
        "zelle_info": i.zelle_info,
        "contact_preferences": list(i.contact_preferences or []),
        "status": i.status,
        "primary_photo": i.primary_photo,
        "photos": [p.photo_url for p in i.photos],
        "created_at": _iso(i.created_at),
        "updated_at": _iso(i.updated_at),
    }
    if with_lender:
        data["lender"] = lender_contact(i.lender)
    return data


def saved_item_to_dict(s) -> dict:
    data = item_to_dict(s.item, with_lender=True)
    data["saved_at"] = _iso(s.created_at)
    return data


def rental_to_dict(r, party: str) -> dict:
    """`party` is the other side of the rental to embed: "lender" or "renter"."""
    other = r.lender if party == "lender" else r.renter
    item = r.item
    return {
        "id": r.id,
        "item_id": r.item_id,
        "renter_id": r.renter_id,
        "lender_id": r.lender_id,
        "rental_start_date": _iso(r.rental_start_date),
        "rental_end_date": _iso(r.rental_end_date),
        "actual_return_date": _iso(r.actual_return_date),
        "status": r.status,
        "created_at": _iso(r.created_at),
        "item_title": item.title if item else None,
        "rental_price_per_week": item.rental_price_per_week if item else None,
        "item_photo": item.primary_photo if item else None,
        f"{party}_name": other.name if other else None,
    }
