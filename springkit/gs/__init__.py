"""Bean registration interfaces, readiness signalling and the start-up banner."""