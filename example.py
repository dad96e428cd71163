"""
Example client of the ticket scanning service
"""
import base64
import json
import sys
from pathlib import Path

import requests


def scan_ticket(image_path: str, api_url: str = "http://localhost:8080", user_id: str = None) -> dict:
    """
    Send a ticket photo for scanning

    Args:
        image_path: Path to the image
        api_url: Service URL
        user_id: Optional owner of the scan

    Returns:
        Scan result
    """
    image_file = Path(image_path)

    if not image_file.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    print(f"📸 Reading image: {image_path}")
    image_bytes = image_file.read_bytes()
    image_base64 = base64.b64encode(image_bytes).decode("utf-8")

    print(f"📦 Image size: {len(image_bytes) / 1024:.2f} KB")
    print(f"🚀 Sending request to {api_url}/api/v1/tickets/scan")

    response = requests.post(
        f"{api_url}/api/v1/tickets/scan",
        json={
            "image": image_base64,
            "user_id": user_id
        },
        timeout=200
    )

    if response.status_code != 200:
        print(f"❌ Error: {response.status_code}")
        print(response.json())
        return None

    result = response.json()

    print(f"\n✅ Status: {result['status']}")
    print(f"🎫 Type: {result['lottery_type']}")
    print(f"📊 Confidence: {result['confidence']:.2%}")
    if result.get("scan_id"):
        print(f"🆔 Scan id: {result['scan_id']}")
    if result.get("ticket_id"):
        print(f"🏷️  Ticket id: {result['ticket_id']}")

    for index, block in enumerate(result.get("blocks", []), start=1):
        print(f"\n🟦 Block {index}:")
        for row in ("row1", "row2", "row3"):
            print(f"   {row}: {block.get(row, [])}")

    numbers = result.get("all_numbers", [])
    print(f"\n🔢 Numbers ({len(numbers)}): {numbers}")

    if result.get("notes"):
        print(f"📝 Notes: {result['notes']}")

    return result


def main():
    """Entry point"""
    if len(sys.argv) < 2:
        print("Usage: python example.py <path_to_ticket_image> [api_url] [user_id]")
        print("Example: python example.py ticket.jpg")
        sys.exit(1)

    image_path = sys.argv[1]
    api_url = sys.argv[2] if len(sys.argv) > 2 else "http://localhost:8080"
    user_id = sys.argv[3] if len(sys.argv) > 3 else None

    try:
        result = scan_ticket(image_path, api_url, user_id)

        if result:
            output_file = Path(image_path).stem + "_scan.json"
            with open(output_file, "w", encoding="utf-8") as f:
                json.dump(result, f, indent=2, ensure_ascii=False)
            print(f"\n💾 Full result saved to: {output_file}")

    except FileNotFoundError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    except requests.exceptions.ConnectionError:
        print(f"❌ Error: Cannot connect to scanner service at {api_url}")
        print("Make sure the service is running: python run.py")
        sys.exit(1)


if __name__ == "__main__":
    main()
