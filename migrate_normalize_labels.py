from app.config import db, PLACES_COLLECTION
from app.core.labels import normalize_labels


# Rewrite comma-joined place_label strings as native lists
def migrate_place_labels(client=db):
    if client is None:
        raise RuntimeError("Firebase credentials not found.")

    places_ref = client.collection(PLACES_COLLECTION)
    docs = places_ref.stream()

    updated_count = 0
    skipped_count = 0
    error_count = 0

    for doc in docs:
        try:
            place_data = doc.to_dict() or {}

            # Already a list (or missing): nothing to do
            if not isinstance(place_data.get("place_label"), str):
                skipped_count += 1
                continue

            labels = [l for l in normalize_labels(place_data["place_label"]) if l]
            places_ref.document(doc.id).update({
                "place_label": labels
            })

            updated_count += 1
            print(f"✅ Updated {doc.id} with labels {labels}")

        except Exception as e:
            error_count += 1
            print(f"❌ Error updating {doc.id}: {e}")

    print("\n--- Migration Complete ---")
    print(f"Updated: {updated_count}")
    print(f"Skipped: {skipped_count}")
    print(f"Errors: {error_count}")
    return updated_count, skipped_count, error_count


if __name__ == "__main__":
    migrate_place_labels()
