import random

from locust import HttpUser, between, task

VEHICLES = {"Motorcycle": 30, "Sedan": 50, "SUV": 50}
SLOTS = [f"{number:02d}" for number in range(1, 11)]


class KioskUser(HttpUser):
    # Wait between 1 and 3 seconds between tasks
    wait_time = between(1, 3)

    def _plate(self) -> str:
        letters = "".join(random.choices("ABCDEFGHJKLMNPRSTUVWXYZ", k=3))
        return f"{letters}{random.randint(100, 999)}"

    @task(3)
    def create_walk_in_invoice(self):
        """
        Race walk-in bookings against a small set of slots.
        Most requests should end in 400 (slot taken) once the slots fill up.
        """
        vehicle = random.choice(list(VEHICLES))
        payload = {
            "type": "walk-in",
            "slot": random.choice(SLOTS),
            "email": "loadtest@example.com",
            "plate": self._plate(),
            "vehicle": vehicle,
            "amount": VEHICLES[vehicle],
        }
        with self.client.post(
            "/api/create-invoice",
            json=payload,
            name="/api/create-invoice",
            catch_response=True,
        ) as response:
            if response.status_code in (200, 400):
                response.success()

    @task(1)
    def verify_exit(self):
        with self.client.post(
            "/api/verify-exit",
            json={"plate": self._plate()},
            name="/api/verify-exit",
            catch_response=True,
        ) as response:
            if response.status_code in (200, 404):
                response.success()

    @task(1)
    def health(self):
        self.client.get("/health", name="/health")
