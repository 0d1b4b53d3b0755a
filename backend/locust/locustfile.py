"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags contention   # Likes/unlikes on one protest
  locust -f locustfile.py --tags browse       # Public listing traffic
  locust -f locustfile.py --tags edge         # Bad input and ownership checks
  locust -f locustfile.py                     # All tests
"""

import random
from datetime import date, timedelta

from locust import HttpUser, between, events, tag, task
from locust.clients import HttpSession

# Shared state
PROTEST_IDS = []
HOT_PROTEST_ID = None


def random_email():
    return f"load_{random.randint(100000, 999999)}@example.com"


def register(client):
    """Register a throwaway organizer and return auth headers, or {} on failure."""
    resp = client.post("/api/organizers/register", json={
        "name": "Load Organizer",
        "email": random_email(),
        "password": "load-test-pw",
    })
    if resp.status_code != 201:
        return {}
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def protest_payload():
    return {
        "name": f"Rally {random.randint(1, 10000)}",
        "cause": random.choice(["Climate", "Housing", "Labor", "Transit"]),
        "location": "City Hall",
        "latitude": round(random.uniform(40.5, 40.9), 7),
        "longitude": round(random.uniform(-74.2, -73.7), 7),
        "date": (date.today() + timedelta(days=random.randint(1, 90))).isoformat(),
        "time": f"{random.randint(8, 20):02d}:00:00",
        "tags": "load, test",
    }


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("Protest Tracker load test starting")
    print("=" * 60)


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    """After contention, the hot protest's like counter must still be >= 0."""
    if HOT_PROTEST_ID is None:
        return

    session = HttpSession(
        base_url=environment.host,
        request_event=environment.events.request,
        user=None,
    )
    resp = session.get(f"/api/protests/{HOT_PROTEST_ID}", name="/api/protests/{id} [final check]")
    if resp.status_code != 200:
        print(f"\nFinal check failed: GET protest {HOT_PROTEST_ID} returned {resp.status_code}\n")
        environment.process_exit_code = 1
        return

    likes = resp.json()["likes"]
    if likes < 0:
        print(f"\nFAIL: protest {HOT_PROTEST_ID} ended with likes={likes}\n")
        environment.process_exit_code = 1
    else:
        print(f"\nOK: protest {HOT_PROTEST_ID} ended with likes={likes}\n")


class ContentionUser(HttpUser):
    """
    TEST 1: Counter contention - many users toggle likes on one protest

    Run: locust -f locustfile.py --tags contention -u 100 -r 50 --run-time 30s

    on_test_stop re-reads the counter; it can also be checked directly:
      SELECT likes FROM protests WHERE id = X;   -- must be >= 0
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        global HOT_PROTEST_ID
        if HOT_PROTEST_ID is None:
            headers = register(self.client)
            if headers:
                resp = self.client.post("/api/protests", json=protest_payload(), headers=headers)
                if resp.status_code == 201:
                    HOT_PROTEST_ID = resp.json()["id"]
                    print(f"\nCreated protest {HOT_PROTEST_ID} for like contention\n")

    @tag("contention")
    @task
    def toggle_like(self):
        """Likes and unlikes race on the same row."""
        if HOT_PROTEST_ID is None:
            return

        with self.client.post(
            f"/api/protests/{HOT_PROTEST_ID}/like",
            json={"liked": random.random() < 0.5},
            name="/api/protests/{id}/like",
            catch_response=True,
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unexpected: {resp.status_code}")
            elif resp.json()["likes"] < 0:
                resp.failure("Like counter went negative")
            else:
                resp.success()


class BrowsingUser(HttpUser):
    """
    TEST 2: Public browsing

    Run: locust -f locustfile.py --tags browse -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("browse")
    @task(10)
    def list_protests(self):
        resp = self.client.get("/api/protests")
        if resp.status_code == 200:
            for protest in resp.json()["protests"][:50]:
                if protest["id"] not in PROTEST_IDS:
                    PROTEST_IDS.append(protest["id"])

    @tag("browse")
    @task(5)
    def list_upcoming(self):
        self.client.get("/api/protests?upcoming=true", name="/api/protests?upcoming")

    @tag("browse")
    @task(3)
    def view_protest(self):
        if PROTEST_IDS:
            self.client.get(f"/api/protests/{random.choice(PROTEST_IDS)}", name="/api/protests/{id}")

    @tag("browse")
    @task(1)
    def health_check(self):
        self.client.get("/api/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - the API answers bad input with proper status codes

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = register(self.client)

    def _expect(self, resp, *codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def like_missing_protest(self):
        with self.client.post("/api/protests/999999/like", json={"liked": True}, catch_response=True) as resp:
            self._expect(resp, 404)

    @tag("edge")
    @task
    def create_without_token(self):
        with self.client.post("/api/protests", json=protest_payload(), catch_response=True) as resp:
            self._expect(resp, 401)

    @tag("edge")
    @task
    def create_missing_date(self):
        payload = protest_payload()
        del payload["date"]
        with self.client.post("/api/protests", json=payload, headers=self.headers, catch_response=True) as resp:
            self._expect(resp, 400)

    @tag("edge")
    @task
    def edit_someone_elses_protest(self):
        if not PROTEST_IDS or not self.headers:
            return
        with self.client.put(
            f"/api/protests/{random.choice(PROTEST_IDS)}",
            json=protest_payload(),
            headers=self.headers,
            name="/api/protests/{id} [not owner]",
            catch_response=True,
        ) as resp:
            self._expect(resp, 403, 404)

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            "/api/organizers/login",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            catch_response=True,
        ) as resp:
            self._expect(resp, 400)


class OrganizerUser(HttpUser):
    """
    TEST 4: Organizers publishing and editing

    Run: locust -f locustfile.py -u 50 -r 10 --run-time 120s
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = register(self.client)
        self.my_protests = []

    @task(3)
    def create_protest(self):
        if not self.headers:
            return
        resp = self.client.post("/api/protests", json=protest_payload(), headers=self.headers)
        if resp.status_code == 201:
            self.my_protests.append(resp.json()["id"])
            PROTEST_IDS.append(resp.json()["id"])

    @task(2)
    def edit_protest(self):
        if self.my_protests:
            self.client.put(
                f"/api/protests/{random.choice(self.my_protests)}",
                json=protest_payload(),
                headers=self.headers,
                name="/api/protests/{id}",
            )

    @task(1)
    def delete_protest(self):
        if self.my_protests:
            protest_id = self.my_protests.pop()
            if protest_id in PROTEST_IDS:
                PROTEST_IDS.remove(protest_id)
            self.client.delete(f"/api/protests/{protest_id}", headers=self.headers, name="/api/protests/{id}")
